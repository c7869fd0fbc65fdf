from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import current_user, require_free_member, require_premium_member
from nagoyameshi.auth.guards import HOME_URL
from nagoyameshi.auth.principal import Member
from nagoyameshi.core.config import settings
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import User
from nagoyameshi.services.billing import BillingService, PaymentGateway, StripeGateway

router = APIRouter(prefix="/subscription", tags=["subscription"])


class PaymentMethodIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # the card form posts Stripe's camelCase field
    payment_method_id: str = Field(..., min_length=1, max_length=255, alias="paymentMethodId")


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return StripeGateway(settings.STRIPE_SECRET, base_url=settings.STRIPE_API_BASE)


def get_billing(
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> BillingService:
    return BillingService(db, gateway)


def _payment_method_dict(billing: BillingService, user: User) -> dict | None:
    pm = billing.current_payment_method(user)
    if pm is None:
        return None
    return {"type": pm.type, "last_four": pm.last_four}


@router.get("/create")
def create(
    member: Member = Depends(require_free_member),
    billing: BillingService = Depends(get_billing),
):
    return {
        "intent": billing.create_setup_intent(),
        "plan": billing.plan,
        "monthly_price": settings.PREMIUM_PLAN_MONTHLY_PRICE,
    }


@router.post("")
def store(
    payload: PaymentMethodIn,
    db: Session = Depends(get_db),
    member: Member = Depends(require_free_member),
    billing: BillingService = Depends(get_billing),
):
    billing.create_subscription(current_user(db, member), payload.payment_method_id)
    return redirect(HOME_URL, flash=MessageCode.SUBSCRIPTION_CREATED)


@router.get("/edit")
def edit(
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
    billing: BillingService = Depends(get_billing),
):
    user = current_user(db, member)
    return {
        "intent": billing.create_setup_intent(),
        "payment_method": _payment_method_dict(billing, user),
    }


@router.patch("")
def update(
    payload: PaymentMethodIn,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
    billing: BillingService = Depends(get_billing),
):
    billing.swap_payment_method(current_user(db, member), payload.payment_method_id)
    return redirect(HOME_URL, flash=MessageCode.PAYMENT_METHOD_UPDATED)


@router.get("/cancel")
def cancel(
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
    billing: BillingService = Depends(get_billing),
):
    return {
        "plan": billing.plan,
        "payment_method": _payment_method_dict(billing, current_user(db, member)),
    }


@router.delete("")
def destroy(
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
    billing: BillingService = Depends(get_billing),
):
    billing.cancel_subscription(current_user(db, member))
    return redirect(HOME_URL, flash=MessageCode.SUBSCRIPTION_CANCELED)
