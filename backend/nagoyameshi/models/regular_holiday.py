from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nagoyameshi.core.db import Base
from nagoyameshi.models.associations import regular_holiday_restaurant


class RegularHoliday(Base):
    __tablename__ = "regular_holidays"

    id: Mapped[int] = mapped_column(primary_key=True)
    day: Mapped[str] = mapped_column(String(32))  # 月曜日 ... 祝日
    day_index: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0=Mon; null for 不定休 etc.

    restaurants = relationship(
        "Restaurant", secondary=regular_holiday_restaurant, back_populates="regular_holidays"
    )
