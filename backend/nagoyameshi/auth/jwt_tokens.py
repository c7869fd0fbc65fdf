"""Signed cookie values naming a server-side session row.

The token only proves which session the browser holds. Whether that session
is still live is decided against the auth_sessions table.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import jwt  # PyJWT

TOKEN_TYPE = "session"


@dataclass(frozen=True)
class JwtConfig:
    secret: str
    issuer: str
    audience: str  # one per realm
    ttl_seconds: int


@dataclass(frozen=True)
class SessionClaims:
    subject_id: int
    sid: str


def encode_session_token(cfg: JwtConfig, claims: SessionClaims) -> str:
    now = int(time.time())
    return jwt.encode(
        {
            "sub": str(claims.subject_id),
            "sid": claims.sid,
            "iat": now,
            "exp": now + cfg.ttl_seconds,
            "iss": cfg.issuer,
            "aud": cfg.audience,
            "typ": TOKEN_TYPE,
        },
        cfg.secret,
        algorithm="HS256",
    )


def decode_session_token(cfg: JwtConfig, token: str) -> SessionClaims:
    """Raises jwt.PyJWTError for anything this realm did not issue."""
    payload = jwt.decode(
        token,
        cfg.secret,
        algorithms=["HS256"],
        issuer=cfg.issuer,
        audience=cfg.audience,
        options={"require": ["exp", "iat", "iss", "aud", "sub", "sid", "typ"]},
    )
    if payload["typ"] != TOKEN_TYPE:
        raise jwt.InvalidTokenError(f"unexpected token type {payload['typ']!r}")
    try:
        return SessionClaims(subject_id=int(payload["sub"]), sid=str(payload["sid"]))
    except ValueError as exc:
        raise jwt.InvalidTokenError("subject is not a user id") from exc
