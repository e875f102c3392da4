"""Registration Service — redeem an invite token into a credential plus member profile.

Invariants:
    - Credential and member are created in ONE transaction: both or neither
    - Preconditions run in order: token -> email match -> credential -> CPF
    - A unique-constraint race (same token/email/CPF redeemed concurrently)
      surfaces as ConflictError, never as a 500
    - The invite is consumed by the member row (members.intent_id is unique)

Design Decisions:
    - create_member_account is module-level: admin-initiated signup
      (services/members.py) runs the exact same unit with a temporary password
    - Explicit rollback on ANY exception inside the unit: the session may be
      shared (tests, scripts), so a half-flushed user must never linger
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from netgroup.core.domain_types import IntentId, MemberStatus, UserRole, utc_now
from netgroup.core.enforce_intent import check_email_matches
from netgroup.core.errors import ConflictError
from netgroup.core.repository_protocols import NotificationEvent, NotificationSink
from netgroup.infrastructure.security import hash_password
from netgroup.models.member import ADDRESS_FIELDS, Member
from netgroup.models.user import User
from netgroup.schemas.membership_intent import CompleteRegistration, ProfileFields
from netgroup.services.membership_intents import MembershipIntentService
from netgroup.services.notifications import dispatch_notification

logger = logging.getLogger(__name__)

_NON_PROFILE_FIELDS = {"address", "invite_token", "password", "intent_id"}


def profile_columns(profile: ProfileFields) -> dict:
    """Flatten a submitted profile into Member column values."""
    columns = profile.model_dump(exclude=_NON_PROFILE_FIELDS)
    address = profile.address.model_dump() if profile.address else {}
    for name in ADDRESS_FIELDS:
        columns[f"address_{name}"] = address.get(name)
    return columns


def build_member(user: User, intent_id: IntentId, profile: ProfileFields) -> Member:
    return Member(
        user_id=user.id,
        intent_id=intent_id,
        status=MemberStatus.ACTIVE.value,
        membership_start_date=utc_now(),
        **profile_columns(profile),
    )


async def check_identity_available(
    db: AsyncSession, email: str, cpf: str | None,
) -> None:
    """Email must not hold a credential or profile; CPF must be unused."""
    user = await db.execute(select(User.id).where(User.email == email))
    member = await db.execute(select(Member.id).where(Member.email == email))
    if user.first() is not None or member.first() is not None:
        raise ConflictError("This email is already registered")
    if cpf:
        taken = await db.execute(select(Member.id).where(Member.cpf == cpf))
        if taken.first() is not None:
            raise ConflictError("This CPF is already registered")


async def create_member_account(
    db: AsyncSession,
    intent_id: IntentId,
    profile: ProfileFields,
    password: str,
) -> tuple[User, Member]:
    """Atomic unit: User -> flush -> Member -> commit."""
    try:
        user = User(
            email=profile.email,
            password_hash=hash_password(password),
            role=UserRole.MEMBER.value,
        )
        db.add(user)
        await db.flush()

        member = build_member(user, intent_id, profile)
        db.add(member)
        await db.flush()
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(
            f"Registration lost a uniqueness race: {e.orig}",
            extra={"intent_id": str(intent_id)},
        )
        raise ConflictError(
            "This invite, email or CPF has already been registered",
        ) from e
    except Exception:
        await db.rollback()
        raise
    return user, member


class RegistrationService:
    """Public token flow: validate -> preconditions -> atomic account creation."""

    def __init__(self, db: AsyncSession, notifier: NotificationSink):
        self.db = db
        self.notifier = notifier
        self.intents = MembershipIntentService(db, notifier)

    async def complete(self, data: CompleteRegistration) -> tuple[User, Member]:
        intent = await self.intents.validate_token(data.invite_token)
        check_email_matches(intent.email, data.email)
        await check_identity_available(self.db, data.email, data.cpf)

        user, member = await create_member_account(
            self.db, intent.id, data, data.password,
        )
        logger.info(
            f"Registration completed for {member.email}",
            extra={"member_id": str(member.id), "intent_id": str(intent.id)},
        )
        dispatch_notification(
            self.notifier.notify_member,
            member, NotificationEvent.REGISTRATION_COMPLETED,
        )
        return user, member
