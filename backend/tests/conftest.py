"""Shared fixtures: one in-memory SQLite database per test, the app wired to it,
and factories for members, administrators and restaurants."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STRIPE_PREMIUM_PLAN_PRICE_ID", "price_test")

from datetime import time
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from nagoyameshi.auth.passwords import hash_password
from nagoyameshi.auth.sessions import ADMIN_COOKIE, MEMBER_COOKIE, start_session
from nagoyameshi.core.config import settings
from nagoyameshi.core.db import Base, get_db
from nagoyameshi.main import app
from nagoyameshi.models import (
    Admin,
    Category,
    Realm,
    RegularHoliday,
    Restaurant,
    Subscription,
    SubscriptionStatus,
    User,
)
from nagoyameshi.routers.subscription import get_payment_gateway
from nagoyameshi.services.billing import (
    BillingError,
    GatewaySubscription,
    PaymentGateway,
    PaymentMethodInfo,
)

PASSWORD = "nagoyameshi"

_seq = count(1)


class FakeGateway(PaymentGateway):
    """In-memory stand-in for the payment provider. Records every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_with: BillingError | None = None

    def _call(self, *args):
        self.calls.append(args)
        if self.fail_with is not None:
            raise self.fail_with

    def create_setup_intent(self) -> str:
        self._call("create_setup_intent")
        return "seti_secret_test"

    def create_customer(self, *, email: str, name: str) -> str:
        self._call("create_customer", email)
        return f"cus_{next(_seq)}"

    def attach_payment_method(self, customer_id: str, payment_method_id: str) -> PaymentMethodInfo:
        self._call("attach_payment_method", customer_id, payment_method_id)
        return PaymentMethodInfo(id=payment_method_id, type="visa", last_four="4242")

    def set_default_payment_method(self, customer_id: str, payment_method_id: str) -> None:
        self._call("set_default_payment_method", customer_id, payment_method_id)

    def create_subscription(self, customer_id: str, price_id: str, payment_method_id: str) -> GatewaySubscription:
        self._call("create_subscription", customer_id, price_id)
        return GatewaySubscription(id=f"sub_{next(_seq)}", status="active", price_id=price_id)

    def cancel_subscription(self, subscription_id: str) -> GatewaySubscription:
        self._call("cancel_subscription", subscription_id)
        return GatewaySubscription(id=subscription_id, status="canceled")


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(db, gateway):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    try:
        with TestClient(app, follow_redirects=False) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


# ---------- Factories ----------

@pytest.fixture
def make_member(db):
    def _make(**overrides) -> User:
        n = next(_seq)
        fields = dict(
            name=f"テスト 太郎{n}",
            kana="テスト タロウ",
            email=f"member{n}@example.com",
            password=hash_password(PASSWORD),
            postal_code="0000000",
            address="テスト",
            phone_number="0000000000",
        )
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_premium_member(db, make_member):
    def _make(**overrides) -> User:
        user = make_member(**overrides)
        db.add(
            Subscription(
                user_id=user.id,
                type=settings.PREMIUM_PLAN_NAME,
                stripe_id=f"sub_{next(_seq)}",
                stripe_status=SubscriptionStatus.ACTIVE.value,
                stripe_price="price_test",
                quantity=1,
            )
        )
        db.commit()
        return user

    return _make


@pytest.fixture
def member(make_member):
    return make_member()


@pytest.fixture
def premium_member(make_premium_member):
    return make_premium_member()


@pytest.fixture
def admin(db):
    row = Admin(email="admin@example.com", password=hash_password(PASSWORD))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def make_restaurant(db):
    def _make(**overrides) -> Restaurant:
        n = next(_seq)
        fields = dict(
            name=f"テスト店{n}",
            description="テスト",
            lowest_price=1000,
            highest_price=5000,
            postal_code="0000000",
            address="テスト",
            opening_time=time(10, 0),
            closing_time=time(20, 0),
            seating_capacity=50,
        )
        fields.update(overrides)
        restaurant = Restaurant(**fields)
        db.add(restaurant)
        db.commit()
        db.refresh(restaurant)
        return restaurant

    return _make


@pytest.fixture
def restaurant(make_restaurant):
    return make_restaurant()


@pytest.fixture
def category(db):
    row = Category(name="和食")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def holidays(db):
    rows = [RegularHoliday(day="月曜日", day_index=0), RegularHoliday(day="火曜日", day_index=1)]
    db.add_all(rows)
    db.commit()
    return rows


# ---------- Sessions ----------

@pytest.fixture
def login_as(db, client):
    """Put a live session cookie for `user` (a User or an Admin) on the client."""

    def _login(user) -> str:
        if isinstance(user, Admin):
            token = start_session(db, realm=Realm.ADMIN, subject_id=user.id)
            client.cookies.set(ADMIN_COOKIE, token)
        else:
            token = start_session(db, realm=Realm.MEMBER, subject_id=user.id)
            client.cookies.set(MEMBER_COOKIE, token)
        return token

    return _login
