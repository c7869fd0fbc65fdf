"""Login sessions for both credential realms.

A login always mints a new session row and a new token (the old one, if the
browser sent any, is revoked first). Logout revokes the row, drops the cookie
and hands out a fresh anti-forgery token.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone

import jwt
from fastapi import Response
from sqlalchemy.orm import Session

from nagoyameshi.auth.jwt_tokens import JwtConfig, SessionClaims, decode_session_token, encode_session_token
from nagoyameshi.core.config import settings
from nagoyameshi.models import AuthSession, Realm

log = logging.getLogger("nagoyameshi.auth.sessions")

MEMBER_COOKIE = "access_token"
ADMIN_COOKIE = "admin_access_token"
CSRF_COOKIE = "XSRF-TOKEN"

_COOKIES = {
    Realm.MEMBER: MEMBER_COOKIE,
    Realm.ADMIN: ADMIN_COOKIE,
}


def cookie_name(realm: Realm) -> str:
    return _COOKIES[realm]


def get_jwt_config(realm: Realm) -> JwtConfig:
    return JwtConfig(
        secret=settings.JWT_SECRET,
        issuer=settings.JWT_ISS,
        audience=settings.ADMIN_JWT_AUD if realm is Realm.ADMIN else settings.MEMBER_JWT_AUD,
        ttl_seconds=settings.ACCESS_TOKEN_TTL_SECONDS,
    )


def _decode(realm: Realm, token: str) -> SessionClaims | None:
    try:
        return decode_session_token(get_jwt_config(realm), token)
    except jwt.PyJWTError:
        log.debug("rejected %s token", realm.value)
        return None


def start_session(db: Session, *, realm: Realm, subject_id: int) -> str:
    sid = secrets.token_hex(32)
    db.add(AuthSession(id=sid, realm=realm.value, subject_id=subject_id))
    db.commit()
    log.info("session started realm=%s subject_id=%s", realm.value, subject_id)
    return encode_session_token(get_jwt_config(realm), SessionClaims(subject_id=subject_id, sid=sid))


def resolve_session(db: Session, *, realm: Realm, token: str | None) -> int | None:
    """Return the subject id behind a live session token, else None."""
    if not token:
        return None

    claims = _decode(realm, token)
    if claims is None:
        return None
    subject_id, sid = claims.subject_id, claims.sid

    row = db.get(AuthSession, sid)
    if row is None or row.revoked_at is not None:
        return None
    if row.realm != realm.value or row.subject_id != subject_id:
        return None
    return subject_id


def end_session(db: Session, *, realm: Realm, token: str | None) -> None:
    if not token:
        return
    claims = _decode(realm, token)
    if claims is None:
        return
    subject_id, sid = claims.subject_id, claims.sid

    row = db.get(AuthSession, sid)
    if row is not None and row.revoked_at is None:
        row.revoked_at = datetime.now(timezone.utc)
        db.commit()
        log.info("session ended realm=%s subject_id=%s", realm.value, subject_id)


def set_session_cookie(response: Response, *, realm: Realm, token: str) -> None:
    response.set_cookie(
        key=cookie_name(realm),
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        domain=settings.COOKIE_DOMAIN,
        path="/",
        max_age=settings.ACCESS_TOKEN_TTL_SECONDS,
    )


def clear_session_cookie(response: Response, *, realm: Realm) -> None:
    response.delete_cookie(
        key=cookie_name(realm),
        path="/",
        domain=settings.COOKIE_DOMAIN,
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def rotate_csrf_token(response: Response) -> str:
    token = secrets.token_urlsafe(32)
    # readable by the front-end, echoed back in the X-XSRF-TOKEN header
    response.set_cookie(
        key=CSRF_COOKIE,
        value=token,
        httponly=False,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        domain=settings.COOKIE_DOMAIN,
        path="/",
    )
    return token
