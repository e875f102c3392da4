"""BusinessReferral ORM — a lead passed from one member to another.

Invariants:
    - referrer_id != referred_to_id (enforced by service; CheckConstraint as backstop)
    - closed_value present whenever status == CLOSED
    - closed_at stamped only on the transition to CLOSED
    - status_history is append-only, loaded newest first

Design Decisions:
    - Numeric(14, 2) with asdecimal=False: money stored exactly, surfaced as float in JSON
    - referrer/referred_to eager-loaded (selectin): every response embeds both summaries
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint, String, Text, Numeric, DateTime, ForeignKey,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from netgroup.db.base import Base


class BusinessReferral(Base):
    """Business referral between two members."""
    __tablename__ = "business_referrals"
    __table_args__ = (
        CheckConstraint("referrer_id <> referred_to_id", name="ck_referral_not_self"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    referrer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("members.id"), nullable=False, index=True,
    )
    referred_to_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("members.id"), nullable=False, index=True,
    )

    # Client
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    client_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    estimated_value: Mapped[float | None] = mapped_column(
        Numeric(14, 2, asdecimal=False), nullable=True,
    )

    # Workflow
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="PENDING", index=True,
    )
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    closed_value: Mapped[float | None] = mapped_column(
        Numeric(14, 2, asdecimal=False), nullable=True,
    )
    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    referrer: Mapped["Member"] = relationship(
        "Member", foreign_keys=[referrer_id], lazy="selectin",
    )
    referred_to: Mapped["Member"] = relationship(
        "Member", foreign_keys=[referred_to_id], lazy="selectin",
    )
    status_history: Mapped[list["ReferralStatusHistory"]] = relationship(
        "ReferralStatusHistory", back_populates="referral",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="ReferralStatusHistory.changed_at.desc()",
    )
