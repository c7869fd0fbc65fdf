from __future__ import annotations

import logging

from fastapi import APIRouter, Cookie, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import get_principal, require_admin
from nagoyameshi.auth.guards import ADMIN_HOME_URL, HOME_URL
from nagoyameshi.auth.passwords import verify_password
from nagoyameshi.auth.principal import Administrator, Principal
from nagoyameshi.auth.sessions import (
    ADMIN_COOKIE,
    clear_session_cookie,
    end_session,
    rotate_csrf_token,
    set_session_cookie,
    start_session,
)
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import Admin, Realm

log = logging.getLogger("nagoyameshi.admin.auth")

router = APIRouter(prefix="/admin", tags=["admin-auth"])


class AdminLoginIn(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


@router.get("/login")
def login_page(principal: Principal = Depends(get_principal)):
    # public page; an admin who is already signed in goes straight home
    if isinstance(principal, Administrator):
        return redirect(ADMIN_HOME_URL)
    return {"page": "admin.login"}


@router.post("/login")
def login(
    payload: AdminLoginIn,
    db: Session = Depends(get_db),
    admin_access_token: str | None = Cookie(default=None, alias=ADMIN_COOKIE),
):
    email = payload.email.strip().lower()
    admin = db.query(Admin).filter(Admin.email == email).one_or_none()
    if admin is None or not verify_password(payload.password, admin.password):
        log.warning("admin login failed email=%s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    # regenerate: never keep a session id that existed before authentication
    end_session(db, realm=Realm.ADMIN, token=admin_access_token)
    token = start_session(db, realm=Realm.ADMIN, subject_id=admin.id)
    log.info("admin logged in admin_id=%s", admin.id)

    response = redirect(ADMIN_HOME_URL, flash=MessageCode.LOGGED_IN)
    set_session_cookie(response, realm=Realm.ADMIN, token=token)
    rotate_csrf_token(response)
    return response


@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
    admin_access_token: str | None = Cookie(default=None, alias=ADMIN_COOKIE),
):
    end_session(db, realm=Realm.ADMIN, token=admin_access_token)
    log.info("admin logged out admin_id=%s", admin.id)

    response = redirect(HOME_URL, flash=MessageCode.LOGGED_OUT)
    clear_session_cookie(response, realm=Realm.ADMIN)
    rotate_csrf_token(response)
    return response
