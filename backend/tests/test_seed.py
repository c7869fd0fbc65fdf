from sqlalchemy.orm import sessionmaker

from nagoyameshi.auth.passwords import verify_password
from nagoyameshi.models import Admin, Company, RegularHoliday, Term
from nagoyameshi.scripts import seed


def test_seed_is_idempotent(db, monkeypatch):
    monkeypatch.setattr(seed, "SessionLocal", sessionmaker(bind=db.get_bind()))

    seed.seed()
    seed.seed()

    admin = db.query(Admin).one()
    assert admin.email == seed.ADMIN_EMAIL
    assert verify_password(seed.ADMIN_PASSWORD, admin.password)
    assert db.query(RegularHoliday).count() == len(seed.REGULAR_HOLIDAYS)
    assert db.query(Company).count() == 1
    assert db.query(Term).count() == 1
