from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nagoyameshi.core.db import Base


class Favorite(Base):
    """Member <-> restaurant favorite. The row existing is the whole state."""

    __tablename__ = "restaurant_user"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "user_id", name="uq_restaurant_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    restaurant = relationship("Restaurant", back_populates="favorites")
    user = relationship("User", back_populates="favorites")
