"""Access decisions for the member site and the admin backend.

`decide` is a pure function of (principal, access class, entitlement,
owner id). It never raises for a denied request; it returns a Decision and
the routing layer (see auth.deps) performs the redirect.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable

from nagoyameshi.auth.principal import Administrator, Guest, Member, Principal
from nagoyameshi.core.messages import MessageCode


class AccessClass(str, enum.Enum):
    ADMIN_ONLY = "admin_only"
    MEMBER_PUBLIC = "member_public"
    MEMBER_AUTHENTICATED = "member_authenticated"
    MEMBER_PREMIUM = "member_premium"
    # start-subscription pages: inverted polarity, free members only
    SUBSCRIPTION_ONBOARDING = "subscription_onboarding"


class Verdict(str, enum.Enum):
    ALLOW = "allow"
    REDIRECT_TO_MEMBER_LOGIN = "redirect_to_member_login"
    REDIRECT_TO_ADMIN_LOGIN = "redirect_to_admin_login"
    REDIRECT_TO_SUBSCRIBE = "redirect_to_subscribe"
    REDIRECT_TO_PAYMENT_METHOD = "redirect_to_payment_method"
    REDIRECT_TO_ADMIN_HOME = "redirect_to_admin_home"
    REDIRECT_TO_OWNER_ONLY_FALLBACK = "redirect_to_owner_only_fallback"


class DenyReason(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    WRONG_REALM = "wrong_realm"
    INSUFFICIENT_ENTITLEMENT = "insufficient_entitlement"
    ALREADY_SUBSCRIBED = "already_subscribed"
    NOT_OWNER = "not_owner"


HOME_URL = "/"
MEMBER_LOGIN_URL = "/login"
ADMIN_LOGIN_URL = "/admin/login"
ADMIN_HOME_URL = "/admin/home"
SUBSCRIBE_URL = "/subscription/create"
PAYMENT_METHOD_URL = "/subscription/edit"

REDIRECT_TARGETS: dict[Verdict, str] = {
    Verdict.REDIRECT_TO_MEMBER_LOGIN: MEMBER_LOGIN_URL,
    Verdict.REDIRECT_TO_ADMIN_LOGIN: ADMIN_LOGIN_URL,
    Verdict.REDIRECT_TO_SUBSCRIBE: SUBSCRIBE_URL,
    Verdict.REDIRECT_TO_PAYMENT_METHOD: PAYMENT_METHOD_URL,
    Verdict.REDIRECT_TO_ADMIN_HOME: ADMIN_HOME_URL,
}


@dataclass(frozen=True)
class Decision:
    verdict: Verdict
    reason: DenyReason | None = None
    target: str | None = None
    message: MessageCode | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict is Verdict.ALLOW


ALLOW = Decision(Verdict.ALLOW)

owner_id_of: Callable[[Any], int] = attrgetter("user_id")


def _redirect(
    verdict: Verdict,
    reason: DenyReason,
    *,
    target: str | None = None,
    message: MessageCode | None = None,
) -> Decision:
    return Decision(verdict=verdict, reason=reason, target=target or REDIRECT_TARGETS[verdict], message=message)


def _not_owner(fallback: str | None) -> Decision:
    return _redirect(
        Verdict.REDIRECT_TO_OWNER_ONLY_FALLBACK,
        DenyReason.NOT_OWNER,
        target=fallback or HOME_URL,
        message=MessageCode.INVALID_ACCESS,
    )


def can_mutate(principal: Principal, resource: Any, owner_of: Callable[[Any], int] = owner_id_of) -> bool:
    """Only the member recorded as the resource's owner may change it."""
    if not isinstance(principal, Member):
        return False
    return owner_of(resource) == principal.id


def check_ownership(
    principal: Principal,
    resource: Any,
    *,
    fallback: str,
    owner_of: Callable[[Any], int] = owner_id_of,
) -> Decision:
    if can_mutate(principal, resource, owner_of):
        return ALLOW
    return _not_owner(fallback)


def decide(
    principal: Principal,
    access: AccessClass,
    *,
    is_premium: Callable[[int], bool] | None = None,
    owner_id: int | None = None,
    fallback: str | None = None,
) -> Decision:
    """Evaluate one request.

    `is_premium` is only called for member principals on entitlement-gated
    classes, and is called every time: entitlement is never cached here.
    `owner_id` (with `fallback`) adds the ownership rule for actions that
    target an existing owned resource.
    """
    if access is AccessClass.ADMIN_ONLY:
        if isinstance(principal, Administrator):
            return ALLOW
        # members are simply not logged in as far as the admin realm goes
        return _redirect(Verdict.REDIRECT_TO_ADMIN_LOGIN, DenyReason.UNAUTHENTICATED)

    # everything below is the member-facing site
    if isinstance(principal, Administrator):
        return _redirect(Verdict.REDIRECT_TO_ADMIN_HOME, DenyReason.WRONG_REALM)

    if access is AccessClass.MEMBER_PUBLIC:
        return ALLOW

    if isinstance(principal, Guest):
        return _redirect(Verdict.REDIRECT_TO_MEMBER_LOGIN, DenyReason.UNAUTHENTICATED)

    if not isinstance(principal, Member):
        raise TypeError(f"unknown principal {principal!r}")

    if access is AccessClass.MEMBER_PREMIUM:
        if not _premium(is_premium, principal):
            return _redirect(Verdict.REDIRECT_TO_SUBSCRIBE, DenyReason.INSUFFICIENT_ENTITLEMENT)
    elif access is AccessClass.SUBSCRIPTION_ONBOARDING:
        if _premium(is_premium, principal):
            return _redirect(Verdict.REDIRECT_TO_PAYMENT_METHOD, DenyReason.ALREADY_SUBSCRIBED)
        return ALLOW
    elif access is not AccessClass.MEMBER_AUTHENTICATED:
        raise ValueError(f"unknown access class {access!r}")

    if owner_id is not None and owner_id != principal.id:
        return _not_owner(fallback)
    return ALLOW


def _premium(is_premium: Callable[[int], bool] | None, member: Member) -> bool:
    if is_premium is None:
        raise ValueError("entitlement resolver required for this access class")
    return bool(is_premium(member.id))
