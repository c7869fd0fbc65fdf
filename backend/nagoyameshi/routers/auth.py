from __future__ import annotations

import logging

from fastapi import APIRouter, Cookie, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import member_site, require_member
from nagoyameshi.auth.guards import HOME_URL
from nagoyameshi.auth.passwords import verify_password
from nagoyameshi.auth.principal import Member, Principal
from nagoyameshi.auth.sessions import (
    MEMBER_COOKIE,
    clear_session_cookie,
    end_session,
    rotate_csrf_token,
    set_session_cookie,
    start_session,
)
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import Realm, User
from nagoyameshi.services.members import EmailTakenError, RegisterIn, register_member

log = logging.getLogger("nagoyameshi.auth")

router = APIRouter(tags=["auth"])


class LoginIn(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


def _signed_in(db: Session, user: User, previous_token: str | None, flash: MessageCode):
    # new session id on every login; whatever the browser held before is revoked
    end_session(db, realm=Realm.MEMBER, token=previous_token)
    token = start_session(db, realm=Realm.MEMBER, subject_id=user.id)

    response = redirect(HOME_URL, flash=flash)
    set_session_cookie(response, realm=Realm.MEMBER, token=token)
    rotate_csrf_token(response)
    return response


@router.get("/register")
def register_page(principal: Principal = Depends(member_site)):
    if isinstance(principal, Member):
        return redirect(HOME_URL)
    return {"page": "register"}


@router.post("/register")
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(member_site),
    access_token: str | None = Cookie(default=None, alias=MEMBER_COOKIE),
):
    try:
        user = register_member(db, payload)
    except EmailTakenError:
        raise HTTPException(status_code=422, detail=[{"loc": ["body", "email"], "msg": "email already taken"}])

    log.info("member registered user_id=%s", user.id)
    return _signed_in(db, user, access_token, MessageCode.REGISTERED)


@router.get("/login")
def login_page(principal: Principal = Depends(member_site)):
    if isinstance(principal, Member):
        return redirect(HOME_URL)
    return {"page": "login"}


@router.post("/login")
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(member_site),
    access_token: str | None = Cookie(default=None, alias=MEMBER_COOKIE),
):
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).one_or_none()
    if user is None or not verify_password(payload.password, user.password):
        log.warning("member login failed email=%s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return _signed_in(db, user, access_token, MessageCode.LOGGED_IN)


@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    member: Member = Depends(require_member),
    access_token: str | None = Cookie(default=None, alias=MEMBER_COOKIE),
):
    end_session(db, realm=Realm.MEMBER, token=access_token)

    response = redirect(HOME_URL, flash=MessageCode.LOGGED_OUT)
    clear_session_cookie(response, realm=Realm.MEMBER)
    rotate_csrf_token(response)
    return response
