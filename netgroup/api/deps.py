"""Service Providers — FastAPI dependencies that build per-request services.

Invariants:
    - Every service gets the request's AsyncSession (get_db) — no shared sessions
    - The notification sink is resolved through get_notifier so tests can override it
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from netgroup.config import get_settings
from netgroup.core.repository_protocols import NotificationSink
from netgroup.infrastructure.database import get_db
from netgroup.services.auth import AuthService
from netgroup.services.dashboard import DashboardService
from netgroup.services.members import MemberService
from netgroup.services.membership_intents import MembershipIntentService
from netgroup.services.notifications import LoggingNotificationSink
from netgroup.services.referrals import ReferralService
from netgroup.services.registration import RegistrationService

_notifier = LoggingNotificationSink()


def get_notifier() -> NotificationSink:
    return _notifier


def get_intent_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
) -> MembershipIntentService:
    return MembershipIntentService(
        db, notifier, get_settings().invite_token_ttl_days,
    )


def get_registration_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
) -> RegistrationService:
    return RegistrationService(db, notifier)


def get_member_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
) -> MemberService:
    return MemberService(db, notifier)


def get_referral_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
) -> ReferralService:
    return ReferralService(db, notifier)


def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(db, get_settings().dashboard_demo_fallback)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)
