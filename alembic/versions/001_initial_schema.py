"""Initial schema — users, membership intents, members, referrals, engagement.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="MEMBER"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "membership_intents",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("motivation", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("reviewed_by_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_notes", sa.Text, nullable=True),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("invite_token", sa.String(64), nullable=True, unique=True),
        sa.Column("token_expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_membership_intents_email", "membership_intents", ["email"])
    op.create_index("ix_membership_intents_status", "membership_intents", ["status"])

    op.create_table(
        "members",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column(
            "intent_id", UUID(as_uuid=True), sa.ForeignKey("membership_intents.id"),
            nullable=False, unique=True,
        ),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("cpf", sa.String(14), nullable=True, unique=True),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("business_description", sa.Text, nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("linkedin_url", sa.String(255), nullable=True),
        sa.Column("address_street", sa.String(255), nullable=True),
        sa.Column("address_number", sa.String(20), nullable=True),
        sa.Column("address_complement", sa.String(100), nullable=True),
        sa.Column("address_neighborhood", sa.String(100), nullable=True),
        sa.Column("address_city", sa.String(100), nullable=True),
        sa.Column("address_state", sa.String(2), nullable=True),
        sa.Column("address_zipcode", sa.String(10), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("membership_start_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("membership_end_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_members_status", "members", ["status"])

    op.create_table(
        "business_referrals",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("referrer_id", UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("referred_to_id", UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("client_phone", sa.String(50), nullable=True),
        sa.Column("client_email", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("estimated_value", sa.Numeric(14, 2), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column("closed_value", sa.Numeric(14, 2), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("referrer_id <> referred_to_id", name="ck_referral_not_self"),
    )
    op.create_index("ix_business_referrals_referrer_id", "business_referrals", ["referrer_id"])
    op.create_index("ix_business_referrals_referred_to_id", "business_referrals", ["referred_to_id"])
    op.create_index("ix_business_referrals_status", "business_referrals", ["status"])

    op.create_table(
        "referral_status_history",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "referral_id", UUID(as_uuid=True),
            sa.ForeignKey("business_referrals.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("from_status", sa.String(20), nullable=True),
        sa.Column("to_status", sa.String(20), nullable=False),
        sa.Column("changed_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_referral_status_history_referral_id", "referral_status_history", ["referral_id"])

    op.create_table(
        "meetings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_meetings_scheduled_at", "meetings", ["scheduled_at"])

    op.create_table(
        "meeting_attendances",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "meeting_id", UUID(as_uuid=True),
            sa.ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("member_id", UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
    )
    op.create_index("ix_meeting_attendances_member_id", "meeting_attendances", ["member_id"])

    op.create_table(
        "one_on_one_meetings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("member1_id", UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("member2_id", UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="SCHEDULED"),
    )

    op.create_table(
        "thank_yous",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("from_member_id", UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("to_member_id", UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("referral_id", UUID(as_uuid=True), sa.ForeignKey("business_referrals.id"), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("thank_yous")
    op.drop_table("one_on_one_meetings")
    op.drop_table("meeting_attendances")
    op.drop_table("meetings")
    op.drop_table("referral_status_history")
    op.drop_table("business_referrals")
    op.drop_table("members")
    op.drop_table("membership_intents")
    op.drop_table("users")
