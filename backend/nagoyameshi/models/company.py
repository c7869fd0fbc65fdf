from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from nagoyameshi.core.db import Base


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    postal_code: Mapped[str] = mapped_column(String(7))
    address: Mapped[str] = mapped_column(String(255))
    representative: Mapped[str] = mapped_column(String(255))
    establishment_date: Mapped[str] = mapped_column(String(255))
    capital: Mapped[str] = mapped_column(String(255))
    business: Mapped[str] = mapped_column(String(255))
    number_of_employees: Mapped[str] = mapped_column(String(255))
