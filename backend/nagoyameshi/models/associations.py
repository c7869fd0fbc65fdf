from sqlalchemy import Column, ForeignKey, Integer, Table, UniqueConstraint

from nagoyameshi.core.db import Base


category_restaurant = Table(
    "category_restaurant",
    Base.metadata,
    Column("id", Integer, primary_key=True),
    Column("restaurant_id", ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("category_id", ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True),
    UniqueConstraint("restaurant_id", "category_id", name="uq_category_restaurant"),
)

regular_holiday_restaurant = Table(
    "regular_holiday_restaurant",
    Base.metadata,
    Column("id", Integer, primary_key=True),
    Column("restaurant_id", ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("regular_holiday_id", ForeignKey("regular_holidays.id", ondelete="CASCADE"), nullable=False, index=True),
    UniqueConstraint("restaurant_id", "regular_holiday_id", name="uq_regular_holiday_restaurant"),
)
