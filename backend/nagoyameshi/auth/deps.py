from __future__ import annotations

import logging

from fastapi import Cookie, Depends, Request
from sqlalchemy.orm import Session

from nagoyameshi.auth.guards import AccessClass, Decision, decide
from nagoyameshi.auth.principal import GUEST, Administrator, Member, Principal
from nagoyameshi.auth.sessions import ADMIN_COOKIE, MEMBER_COOKIE, resolve_session
from nagoyameshi.core.db import get_db
from nagoyameshi.models import Admin, Realm, User
from nagoyameshi.services.billing import is_premium

log = logging.getLogger("nagoyameshi.auth")


class GuardRedirect(Exception):
    """A denied Decision on its way to the redirect handler in main."""

    def __init__(self, decision: Decision):
        super().__init__(decision.verdict.value)
        self.decision = decision


def enforce(decision: Decision, *, request: Request | None = None, principal: Principal | None = None) -> None:
    if decision.allowed:
        return
    log.info(
        "access denied reason=%s principal=%r path=%s -> %s",
        decision.reason.value if decision.reason else None,
        principal,
        request.url.path if request is not None else None,
        decision.target,
    )
    raise GuardRedirect(decision)


def get_principal(
    db: Session = Depends(get_db),
    access_token: str | None = Cookie(default=None, alias=MEMBER_COOKIE),
    admin_access_token: str | None = Cookie(default=None, alias=ADMIN_COOKIE),
) -> Principal:
    """Resolve exactly one principal. An admin session wins over a member one."""
    admin_id = resolve_session(db, realm=Realm.ADMIN, token=admin_access_token)
    if admin_id is not None:
        admin = db.get(Admin, admin_id)
        if admin is not None:
            return Administrator(id=admin.id, email=admin.email)

    user_id = resolve_session(db, realm=Realm.MEMBER, token=access_token)
    if user_id is not None:
        user = db.get(User, user_id)
        if user is not None:
            return Member(id=user.id, email=user.email)

    return GUEST


def _guard(request: Request, db: Session, principal: Principal, access: AccessClass) -> None:
    decision = decide(principal, access, is_premium=lambda user_id: is_premium(db, user_id))
    enforce(decision, request=request, principal=principal)


def member_site(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> Principal:
    _guard(request, db, principal, AccessClass.MEMBER_PUBLIC)
    return principal


def require_member(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> Member:
    _guard(request, db, principal, AccessClass.MEMBER_AUTHENTICATED)
    return principal


def require_premium_member(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> Member:
    _guard(request, db, principal, AccessClass.MEMBER_PREMIUM)
    return principal


def require_free_member(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> Member:
    _guard(request, db, principal, AccessClass.SUBSCRIPTION_ONBOARDING)
    return principal


def require_admin(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> Administrator:
    _guard(request, db, principal, AccessClass.ADMIN_ONLY)
    return principal


def current_user(db: Session, member: Member) -> User:
    # already in the identity map from get_principal
    return db.get(User, member.id)
