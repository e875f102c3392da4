"""Seed Script — populate a fresh database with an admin and a small sample group.

Usage:
    DATABASE_URL=postgresql+asyncpg://... python -m scripts.seed

Invariants:
    - Refuses to run when members already exist (never duplicates sample data)
    - Every sample member redeems its own APPROVED intent, as registration would
    - Engagement tables (meetings, attendances, one-on-ones, thank-yous) are
      filled only here: the API exposes no write surface for them
"""

import asyncio
import logging
from datetime import timedelta

from sqlalchemy import func, select

from netgroup.config import get_settings
from netgroup.core.domain_types import (
    AttendanceStatus, IntentStatus, MemberStatus, OneOnOneStatus,
    ReferralStatus, UserRole, utc_now,
)
from netgroup.core.invite_tokens import compute_token_expiry, generate_invite_token
from netgroup.db.session import create_session_factory
from netgroup.infrastructure.observability import setup_logging
from netgroup.infrastructure.security import hash_password
from netgroup.models import (
    BusinessReferral, Meeting, MeetingAttendance, Member, MembershipIntent,
    OneOnOneMeeting, ReferralStatusHistory, ThankYou, User,
)

logger = logging.getLogger("netgroup.seed")

ADMIN_EMAIL = "admin@netgroup.local"
ADMIN_PASSWORD = "admin12345"
MEMBER_PASSWORD = "member12345"

SAMPLE_MEMBERS = [
    ("Ana Souza", "ana@example.com", "Souza Arquitetura", "Architecture", "123.456.789-01"),
    ("Bruno Lima", "bruno@example.com", "Lima Contabilidade", "Accounting", "234.567.890-12"),
    ("Carla Mendes", "carla@example.com", "Mendes Advocacia", "Law", "345.678.901-23"),
    ("Diego Rocha", "diego@example.com", "Rocha Seguros", "Insurance", "456.789.012-34"),
]


async def seed() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    session_factory = create_session_factory(settings.database_url)

    async with session_factory() as db:
        if await db.scalar(select(func.count()).select_from(Member)):
            logger.info("Members already present, nothing to seed")
            return

        now = utc_now()
        admin = User(
            email=ADMIN_EMAIL,
            password_hash=hash_password(ADMIN_PASSWORD),
            role=UserRole.ADMIN.value,
        )
        db.add(admin)
        await db.flush()

        members = []
        for full_name, email, company, industry, cpf in SAMPLE_MEMBERS:
            intent = MembershipIntent(
                full_name=full_name, email=email, company=company, industry=industry,
                motivation="Looking to grow my network through qualified referrals.",
                status=IntentStatus.APPROVED.value,
                reviewed_by_id=admin.id, reviewed_at=now,
                invite_token=generate_invite_token(),
                token_expires_at=compute_token_expiry(now, settings.invite_token_ttl_days),
            )
            user = User(
                email=email, password_hash=hash_password(MEMBER_PASSWORD),
                role=UserRole.MEMBER.value,
            )
            db.add_all([intent, user])
            await db.flush()
            member = Member(
                user_id=user.id, intent_id=intent.id, full_name=full_name,
                email=email, company=company, industry=industry, cpf=cpf,
                status=MemberStatus.ACTIVE.value, membership_start_date=now,
            )
            db.add(member)
            members.append(member)
        db.add(MembershipIntent(
            full_name="Eva Martins", email="eva@example.com", company="Martins TI",
            industry="Technology",
            motivation="I want to meet entrepreneurs from other industries.",
            status=IntentStatus.PENDING.value,
        ))
        await db.flush()

        ana, bruno, carla, diego = members
        closed = BusinessReferral(
            referrer_id=ana.id, referred_to_id=bruno.id,
            client_name="Padaria Central",
            description="Bakery owner needs a new accountant for the next fiscal year.",
            estimated_value=12000.0, status=ReferralStatus.CLOSED.value,
            closed_value=15000.0, closed_at=now, feedback="Contract signed.",
        )
        closed.status_history.extend([
            ReferralStatusHistory(
                from_status=ReferralStatus.CONTACTED.value,
                to_status=ReferralStatus.CLOSED.value,
                changed_by=bruno.user_id, notes="Contract signed.",
            ),
            ReferralStatusHistory(
                from_status=None, to_status=ReferralStatus.PENDING.value,
                changed_by=ana.user_id,
            ),
        ])
        pending = BusinessReferral(
            referrer_id=carla.id, referred_to_id=diego.id,
            client_name="Construtora Alfa",
            description="Construction company reviewing its fleet insurance policy.",
            estimated_value=40000.0, status=ReferralStatus.PENDING.value,
        )
        pending.status_history.append(ReferralStatusHistory(
            from_status=None, to_status=ReferralStatus.PENDING.value,
            changed_by=carla.user_id,
        ))
        db.add_all([closed, pending])
        await db.flush()

        past = Meeting(title="Weekly meeting #1", scheduled_at=now - timedelta(days=7))
        upcoming = Meeting(title="Weekly meeting #2", scheduled_at=now + timedelta(days=7))
        db.add_all([past, upcoming])
        await db.flush()
        attendance = [
            AttendanceStatus.PRESENT, AttendanceStatus.LATE,
            AttendanceStatus.PRESENT, AttendanceStatus.ABSENT,
        ]
        db.add_all([
            MeetingAttendance(meeting_id=past.id, member_id=m.id, status=s.value)
            for m, s in zip(members, attendance)
        ])
        db.add(OneOnOneMeeting(
            member1_id=ana.id, member2_id=carla.id,
            scheduled_at=now - timedelta(days=3),
            status=OneOnOneStatus.COMPLETED.value,
        ))
        db.add(ThankYou(
            from_member_id=bruno.id, to_member_id=ana.id, referral_id=closed.id,
            amount=15000.0, message="Thanks for the bakery referral!",
        ))
        await db.commit()
        logger.info(f"Seeded admin {ADMIN_EMAIL} and {len(members)} members")


if __name__ == "__main__":
    asyncio.run(seed())
