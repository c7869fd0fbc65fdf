from __future__ import annotations

from datetime import datetime, time, timezone

from sqlalchemy import DateTime, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nagoyameshi.core.db import Base
from nagoyameshi.models.associations import category_restaurant, regular_holiday_restaurant


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Restaurant(Base):
    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    image: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text)

    lowest_price: Mapped[int] = mapped_column(Integer)
    highest_price: Mapped[int] = mapped_column(Integer)

    postal_code: Mapped[str] = mapped_column(String(7))
    address: Mapped[str] = mapped_column(String(255))

    opening_time: Mapped[time] = mapped_column(Time)
    closing_time: Mapped[time] = mapped_column(Time)
    seating_capacity: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    categories = relationship("Category", secondary=category_restaurant, back_populates="restaurants")
    regular_holidays = relationship(
        "RegularHoliday", secondary=regular_holiday_restaurant, back_populates="restaurants"
    )

    # deleting a restaurant removes everything hanging off it in the same flush
    reviews = relationship("Review", back_populates="restaurant", cascade="all, delete")
    reservations = relationship("Reservation", back_populates="restaurant", cascade="all, delete")
    favorites = relationship("Favorite", back_populates="restaurant", cascade="all, delete")
