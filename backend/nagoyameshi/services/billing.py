"""
Premium plan billing.

The payment provider (Stripe) owns the subscription state machine; we keep a
local mirror in `subscriptions` and only ever ask one question of it:
is this member on an active premium plan right now.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from nagoyameshi.core.config import settings
from nagoyameshi.models import Subscription, SubscriptionStatus, User

logger = logging.getLogger("nagoyameshi.billing")


class BillingError(Exception):
    """Error from the payment provider."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


@dataclass
class PaymentMethodInfo:
    id: str
    type: str
    last_four: Optional[str] = None


@dataclass
class GatewaySubscription:
    id: str
    status: str
    price_id: Optional[str] = None


class PaymentGateway:
    """Calls the billing core needs from a payment provider."""

    def create_setup_intent(self) -> str:
        raise NotImplementedError

    def create_customer(self, *, email: str, name: str) -> str:
        raise NotImplementedError

    def attach_payment_method(self, customer_id: str, payment_method_id: str) -> PaymentMethodInfo:
        raise NotImplementedError

    def set_default_payment_method(self, customer_id: str, payment_method_id: str) -> None:
        raise NotImplementedError

    def create_subscription(self, customer_id: str, price_id: str, payment_method_id: str) -> GatewaySubscription:
        raise NotImplementedError

    def cancel_subscription(self, subscription_id: str) -> GatewaySubscription:
        raise NotImplementedError


class StripeGateway(PaymentGateway):
    """
    Stripe REST API client.

    Form-encoded requests, basic auth with the secret key. Any non-2xx
    response or transport failure becomes a BillingError.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.stripe.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            base_url=base_url,
            auth=(api_key, ""),
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, data=data)
        except httpx.HTTPError as e:
            logger.exception("stripe request failed method=%s path=%s", method, path)
            raise BillingError(f"Payment provider unreachable: {e}", code="transport_error") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            err = body.get("error", {}) if isinstance(body, dict) else {}
            logger.warning(
                "stripe error status=%s path=%s code=%s", response.status_code, path, err.get("code")
            )
            raise BillingError(
                err.get("message") or f"Payment provider returned {response.status_code}",
                code=err.get("code"),
                details=err,
            )
        return body

    def create_setup_intent(self) -> str:
        body = self._request("POST", "/setup_intents", {"usage": "off_session"})
        return body["client_secret"]

    def create_customer(self, *, email: str, name: str) -> str:
        body = self._request("POST", "/customers", {"email": email, "name": name})
        return body["id"]

    def attach_payment_method(self, customer_id: str, payment_method_id: str) -> PaymentMethodInfo:
        body = self._request("POST", f"/payment_methods/{payment_method_id}/attach", {"customer": customer_id})
        card = body.get("card") or {}
        return PaymentMethodInfo(
            id=body["id"],
            type=card.get("brand") or body.get("type") or "card",
            last_four=card.get("last4"),
        )

    def set_default_payment_method(self, customer_id: str, payment_method_id: str) -> None:
        self._request(
            "POST",
            f"/customers/{customer_id}",
            {"invoice_settings[default_payment_method]": payment_method_id},
        )

    def create_subscription(self, customer_id: str, price_id: str, payment_method_id: str) -> GatewaySubscription:
        body = self._request(
            "POST",
            "/subscriptions",
            {
                "customer": customer_id,
                "items[0][price]": price_id,
                "default_payment_method": payment_method_id,
            },
        )
        return GatewaySubscription(id=body["id"], status=body["status"], price_id=price_id)

    def cancel_subscription(self, subscription_id: str) -> GatewaySubscription:
        body = self._request("DELETE", f"/subscriptions/{subscription_id}")
        return GatewaySubscription(id=body["id"], status=body["status"])


# ---------- Entitlement ----------

def is_premium(db: Session, user_id: int, *, plan: Optional[str] = None) -> bool:
    """Read the member's entitlement straight from the subscriptions table.

    Called on every gated request; nothing about it is stored on the user.
    """
    plan = plan or settings.PREMIUM_PLAN_NAME
    n = db.scalar(
        select(func.count(Subscription.id)).where(
            Subscription.user_id == user_id,
            Subscription.type == plan,
            Subscription.stripe_status == SubscriptionStatus.ACTIVE.value,
        )
    )
    return bool(n)


def count_premium_members(db: Session, *, plan: Optional[str] = None) -> int:
    plan = plan or settings.PREMIUM_PLAN_NAME
    n = db.scalar(
        select(func.count(func.distinct(Subscription.user_id))).where(
            Subscription.type == plan,
            Subscription.stripe_status == SubscriptionStatus.ACTIVE.value,
        )
    )
    return int(n or 0)


class BillingService:
    """Premium plan lifecycle for one member at a time.

    Local rows are written only after the provider call succeeded; on any
    BillingError the session is rolled back and the error re-raised.
    """

    def __init__(self, db: Session, gateway: PaymentGateway, *, plan: Optional[str] = None, price_id: Optional[str] = None):
        self.db = db
        self.gateway = gateway
        self.plan = plan or settings.PREMIUM_PLAN_NAME
        self.price_id = price_id or settings.STRIPE_PREMIUM_PLAN_PRICE_ID

    def is_subscribed(self, user: User) -> bool:
        return is_premium(self.db, user.id, plan=self.plan)

    def active_subscription(self, user: User) -> Optional[Subscription]:
        return self.db.execute(
            select(Subscription)
            .where(
                Subscription.user_id == user.id,
                Subscription.type == self.plan,
                Subscription.stripe_status == SubscriptionStatus.ACTIVE.value,
            )
            .order_by(Subscription.id.desc())
        ).scalars().first()

    def create_setup_intent(self) -> str:
        return self.gateway.create_setup_intent()

    def current_payment_method(self, user: User) -> Optional[PaymentMethodInfo]:
        if not user.pm_type:
            return None
        return PaymentMethodInfo(id="", type=user.pm_type, last_four=user.pm_last_four)

    def _ensure_customer(self, user: User) -> str:
        if not user.stripe_id:
            user.stripe_id = self.gateway.create_customer(email=user.email, name=user.name)
        return user.stripe_id

    def create_subscription(self, user: User, payment_method_id: str) -> Subscription:
        try:
            customer_id = self._ensure_customer(user)
            pm = self.gateway.attach_payment_method(customer_id, payment_method_id)
            self.gateway.set_default_payment_method(customer_id, pm.id)
            remote = self.gateway.create_subscription(customer_id, self.price_id, pm.id)
        except BillingError:
            self.db.rollback()
            raise

        user.pm_type = pm.type
        user.pm_last_four = pm.last_four
        sub = Subscription(
            user_id=user.id,
            type=self.plan,
            stripe_id=remote.id,
            stripe_status=remote.status,
            stripe_price=remote.price_id,
            quantity=1,
        )
        self.db.add(sub)
        self.db.commit()
        logger.info("subscription created user_id=%s status=%s", user.id, remote.status)
        return sub

    def swap_payment_method(self, user: User, payment_method_id: str) -> PaymentMethodInfo:
        try:
            customer_id = self._ensure_customer(user)
            pm = self.gateway.attach_payment_method(customer_id, payment_method_id)
            self.gateway.set_default_payment_method(customer_id, pm.id)
        except BillingError:
            self.db.rollback()
            raise

        user.pm_type = pm.type
        user.pm_last_four = pm.last_four
        self.db.commit()
        logger.info("payment method updated user_id=%s", user.id)
        return pm

    def cancel_subscription(self, user: User) -> Optional[Subscription]:
        """Cancel immediately (no grace period)."""
        sub = self.active_subscription(user)
        if sub is None:
            return None

        try:
            remote = self.gateway.cancel_subscription(sub.stripe_id)
        except BillingError:
            self.db.rollback()
            raise

        sub.stripe_status = remote.status or SubscriptionStatus.CANCELED.value
        sub.ends_at = datetime.now(timezone.utc)
        self.db.commit()
        logger.info("subscription canceled user_id=%s", user.id)
        return sub
