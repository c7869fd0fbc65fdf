from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nagoyameshi.core.db import Base
from nagoyameshi.models.associations import category_restaurant


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))

    restaurants = relationship("Restaurant", secondary=category_restaurant, back_populates="categories")
