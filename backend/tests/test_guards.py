"""Access decisions: realm, entitlement and ownership."""

from types import SimpleNamespace

import pytest

from nagoyameshi.auth.guards import (
    ADMIN_HOME_URL,
    ADMIN_LOGIN_URL,
    MEMBER_LOGIN_URL,
    PAYMENT_METHOD_URL,
    SUBSCRIBE_URL,
    AccessClass,
    DenyReason,
    Verdict,
    can_mutate,
    check_ownership,
    decide,
)
from nagoyameshi.auth.principal import GUEST, Administrator, Member
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.models import SubscriptionStatus
from nagoyameshi.services.billing import is_premium

FREE = Member(id=1, email="free@example.com")
PREMIUM = Member(id=2, email="premium@example.com")
ADMIN = Administrator(id=1, email="admin@example.com")

PREMIUM_IDS = {PREMIUM.id}


def premium_lookup(user_id: int) -> bool:
    return user_id in PREMIUM_IDS


A = Verdict.ALLOW
TO_MEMBER_LOGIN = Verdict.REDIRECT_TO_MEMBER_LOGIN
TO_ADMIN_LOGIN = Verdict.REDIRECT_TO_ADMIN_LOGIN
TO_ADMIN_HOME = Verdict.REDIRECT_TO_ADMIN_HOME
TO_SUBSCRIBE = Verdict.REDIRECT_TO_SUBSCRIBE
TO_PAYMENT = Verdict.REDIRECT_TO_PAYMENT_METHOD

# (access class, principal, expected verdict)
TRUTH_TABLE = [
    (AccessClass.ADMIN_ONLY, GUEST, TO_ADMIN_LOGIN),
    (AccessClass.ADMIN_ONLY, FREE, TO_ADMIN_LOGIN),
    (AccessClass.ADMIN_ONLY, PREMIUM, TO_ADMIN_LOGIN),
    (AccessClass.ADMIN_ONLY, ADMIN, A),
    (AccessClass.MEMBER_PUBLIC, GUEST, A),
    (AccessClass.MEMBER_PUBLIC, FREE, A),
    (AccessClass.MEMBER_PUBLIC, PREMIUM, A),
    (AccessClass.MEMBER_PUBLIC, ADMIN, TO_ADMIN_HOME),
    (AccessClass.MEMBER_AUTHENTICATED, GUEST, TO_MEMBER_LOGIN),
    (AccessClass.MEMBER_AUTHENTICATED, FREE, A),
    (AccessClass.MEMBER_AUTHENTICATED, PREMIUM, A),
    (AccessClass.MEMBER_AUTHENTICATED, ADMIN, TO_ADMIN_HOME),
    (AccessClass.MEMBER_PREMIUM, GUEST, TO_MEMBER_LOGIN),
    (AccessClass.MEMBER_PREMIUM, FREE, TO_SUBSCRIBE),
    (AccessClass.MEMBER_PREMIUM, PREMIUM, A),
    (AccessClass.MEMBER_PREMIUM, ADMIN, TO_ADMIN_HOME),
    (AccessClass.SUBSCRIPTION_ONBOARDING, GUEST, TO_MEMBER_LOGIN),
    (AccessClass.SUBSCRIPTION_ONBOARDING, FREE, A),
    (AccessClass.SUBSCRIPTION_ONBOARDING, PREMIUM, TO_PAYMENT),
    (AccessClass.SUBSCRIPTION_ONBOARDING, ADMIN, TO_ADMIN_HOME),
]


@pytest.mark.parametrize("access,principal,expected", TRUTH_TABLE)
def test_decision_truth_table(access, principal, expected):
    decision = decide(principal, access, is_premium=premium_lookup)
    assert decision.verdict is expected
    assert decision.allowed is (expected is A)


def test_every_principal_and_access_class_is_covered():
    covered = {(a, p) for a, p, _ in TRUTH_TABLE}
    assert len(covered) == len(AccessClass) * 4


@pytest.mark.parametrize(
    "verdict,target",
    [
        (TO_MEMBER_LOGIN, MEMBER_LOGIN_URL),
        (TO_ADMIN_LOGIN, ADMIN_LOGIN_URL),
        (TO_ADMIN_HOME, ADMIN_HOME_URL),
        (TO_SUBSCRIBE, SUBSCRIBE_URL),
        (TO_PAYMENT, PAYMENT_METHOD_URL),
    ],
)
def test_redirect_targets(verdict, target):
    decision = next(
        decide(p, a, is_premium=premium_lookup)
        for a, p, v in TRUTH_TABLE
        if v is verdict
    )
    assert decision.target == target


def test_deny_reasons():
    assert decide(GUEST, AccessClass.MEMBER_PREMIUM).reason is DenyReason.UNAUTHENTICATED
    assert decide(ADMIN, AccessClass.MEMBER_PUBLIC).reason is DenyReason.WRONG_REALM
    assert (
        decide(FREE, AccessClass.MEMBER_PREMIUM, is_premium=premium_lookup).reason
        is DenyReason.INSUFFICIENT_ENTITLEMENT
    )
    assert (
        decide(PREMIUM, AccessClass.SUBSCRIPTION_ONBOARDING, is_premium=premium_lookup).reason
        is DenyReason.ALREADY_SUBSCRIBED
    )


def test_admin_is_rejected_before_entitlement_is_looked_up():
    def explode(user_id):
        raise AssertionError("entitlement must not be resolved for administrators")

    decision = decide(ADMIN, AccessClass.MEMBER_PREMIUM, is_premium=explode, owner_id=ADMIN.id)
    assert decision.verdict is TO_ADMIN_HOME


def test_entitlement_gated_class_requires_a_resolver():
    with pytest.raises(ValueError):
        decide(FREE, AccessClass.MEMBER_PREMIUM)


# ---------- Ownership ----------

def test_owner_mismatch_redirects_to_fallback_with_message():
    decision = decide(
        PREMIUM,
        AccessClass.MEMBER_PREMIUM,
        is_premium=premium_lookup,
        owner_id=999,
        fallback="/reservations",
    )
    assert decision.verdict is Verdict.REDIRECT_TO_OWNER_ONLY_FALLBACK
    assert decision.reason is DenyReason.NOT_OWNER
    assert decision.target == "/reservations"
    assert decision.message is MessageCode.INVALID_ACCESS


def test_owner_passes_ownership_rule():
    decision = decide(PREMIUM, AccessClass.MEMBER_PREMIUM, is_premium=premium_lookup, owner_id=PREMIUM.id)
    assert decision.allowed


def test_free_owner_still_needs_entitlement():
    decision = decide(FREE, AccessClass.MEMBER_PREMIUM, is_premium=premium_lookup, owner_id=FREE.id)
    assert decision.verdict is TO_SUBSCRIBE


@pytest.mark.parametrize("owner_id", [1, 3, 42])
def test_other_members_cannot_mutate(owner_id):
    resource = SimpleNamespace(user_id=owner_id)
    # PREMIUM has id 2; entitlement does not matter for ownership
    assert can_mutate(PREMIUM, resource) is False


def test_owner_can_mutate():
    assert can_mutate(PREMIUM, SimpleNamespace(user_id=PREMIUM.id)) is True


def test_guest_and_admin_never_mutate():
    resource = SimpleNamespace(user_id=1)
    assert can_mutate(GUEST, resource) is False
    # same numeric id, different realm
    assert can_mutate(ADMIN, resource) is False


def test_check_ownership_with_custom_owner_accessor():
    profile = SimpleNamespace(id=FREE.id)
    ok = check_ownership(FREE, profile, fallback="/user", owner_of=lambda r: r.id)
    denied = check_ownership(PREMIUM, profile, fallback="/user", owner_of=lambda r: r.id)

    assert ok.allowed
    assert denied.verdict is Verdict.REDIRECT_TO_OWNER_ONLY_FALLBACK
    assert denied.target == "/user"


# ---------- Entitlement is read on every call ----------

def test_entitlement_change_is_seen_by_next_decision(db, premium_member):
    member = Member(id=premium_member.id, email=premium_member.email)
    lookup = lambda user_id: is_premium(db, user_id)

    assert decide(member, AccessClass.MEMBER_PREMIUM, is_premium=lookup).allowed

    sub = premium_member.subscriptions[0]
    sub.stripe_status = SubscriptionStatus.CANCELED.value
    db.commit()
    assert decide(member, AccessClass.MEMBER_PREMIUM, is_premium=lookup).verdict is TO_SUBSCRIBE

    sub.stripe_status = SubscriptionStatus.ACTIVE.value
    db.commit()
    assert decide(member, AccessClass.MEMBER_PREMIUM, is_premium=lookup).allowed
