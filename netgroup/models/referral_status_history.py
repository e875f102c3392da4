"""ReferralStatusHistory ORM — immutable log of referral status transitions.

Invariants:
    - Append-only: rows are inserted, never updated or deleted by the application
    - from_status is NULL only for the creation record (None -> PENDING)
    - changed_by references the acting User (not Member)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from netgroup.db.base import Base


class ReferralStatusHistory(Base):
    """One status transition of a BusinessReferral."""
    __tablename__ = "referral_status_history"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    referral_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("business_referrals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    referral: Mapped["BusinessReferral"] = relationship(
        "BusinessReferral", back_populates="status_history",
    )
