"""Engagement ORM — meetings, attendance, one-on-ones and thank-yous.

Invariants:
    - Read by member statistics and the dashboard only; no write API
    - Attendance status PRESENT or LATE counts as attended
    - One-on-ones count toward a member on either side (member1 or member2)

Design Decisions:
    - Grouped in one module: four small tables that only exist to feed statistics
      (ADR: max 3-4 files to understand a feature)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from netgroup.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Meeting(Base):
    """Group meeting (weekly plenary)."""
    __tablename__ = "meetings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    scheduled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )


class MeetingAttendance(Base):
    """A member's attendance record for one meeting."""
    __tablename__ = "meeting_attendances"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    meeting_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("members.id"), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)


class OneOnOneMeeting(Base):
    """Private meeting between two members."""
    __tablename__ = "one_on_one_meetings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    member1_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("members.id"), nullable=False,
    )
    member2_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("members.id"), nullable=False,
    )
    scheduled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="SCHEDULED",
    )


class ThankYou(Base):
    """Public acknowledgment for business generated by a referral."""
    __tablename__ = "thank_yous"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    from_member_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("members.id"), nullable=False,
    )
    to_member_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("members.id"), nullable=False,
    )
    referral_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("business_referrals.id"), nullable=True,
    )
    amount: Mapped[float | None] = mapped_column(
        Numeric(14, 2, asdecimal=False), nullable=True,
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
