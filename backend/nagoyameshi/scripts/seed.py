"""Seed the reference rows the site expects to exist.

Safe to run repeatedly: rows that are already there are left alone.

    python -m nagoyameshi.scripts.seed

Env:
  - database_url (via nagoyameshi.core.config)
  - ADMIN_EMAIL / ADMIN_PASSWORD for the administrator account
"""

from __future__ import annotations

import os

from sqlalchemy import select

from nagoyameshi.auth.passwords import hash_password
from nagoyameshi.core.db import SessionLocal
from nagoyameshi.models import Admin, Company, RegularHoliday, Term

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "nagoyameshi")

# (label, weekday index; None when the holiday is not a weekday)
REGULAR_HOLIDAYS = [
    ("月曜日", 0),
    ("火曜日", 1),
    ("水曜日", 2),
    ("木曜日", 3),
    ("金曜日", 4),
    ("土曜日", 5),
    ("日曜日", 6),
    ("祝日", None),
    ("不定休", None),
]

COMPANY = {
    "name": "NAGOYAMESHI株式会社",
    "postal_code": "1010022",
    "address": "東京都千代田区神田練塀町300番地",
    "representative": "侍 太郎",
    "establishment_date": "2015年3月19日",
    "capital": "110,000千円",
    "business": "飲食店等の情報提供サービス",
    "number_of_employees": "8名",
}

TERMS = "この利用規約（以下「本規約」）は、NAGOYAMESHI（以下「当サービス」）の利用条件を定めるものです。"


def seed() -> None:
    with SessionLocal() as db:
        admin_created = 0
        if db.scalars(select(Admin).where(Admin.email == ADMIN_EMAIL)).first() is None:
            db.add(Admin(email=ADMIN_EMAIL, password=hash_password(ADMIN_PASSWORD)))
            admin_created = 1

        existing_days = set(db.scalars(select(RegularHoliday.day)).all())
        holidays_created = 0
        for day, day_index in REGULAR_HOLIDAYS:
            if day not in existing_days:
                db.add(RegularHoliday(day=day, day_index=day_index))
                holidays_created += 1

        company_created = 0
        if db.scalars(select(Company)).first() is None:
            db.add(Company(**COMPANY))
            company_created = 1

        terms_created = 0
        if db.scalars(select(Term)).first() is None:
            db.add(Term(content=TERMS))
            terms_created = 1

        db.commit()

        print(
            f"Seed done. admin_created={admin_created}, holidays_created={holidays_created}, "
            f"company_created={company_created}, terms_created={terms_created}"
        )


if __name__ == "__main__":
    seed()
