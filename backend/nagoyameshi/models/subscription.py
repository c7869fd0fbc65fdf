from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nagoyameshi.core.db import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Subscription(Base):
    """Local mirror of the payment provider's subscription record."""

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    type: Mapped[str] = mapped_column(String(64), nullable=False)  # plan name, e.g. premium_plan
    stripe_id: Mapped[str] = mapped_column(String(255), unique=True)
    # stored as a string, compared against SubscriptionStatus in code
    stripe_status: Mapped[str] = mapped_column(String(32), nullable=False)
    stripe_price: Mapped[str | None] = mapped_column(String(255), nullable=True)
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    user = relationship("User", back_populates="subscriptions")
