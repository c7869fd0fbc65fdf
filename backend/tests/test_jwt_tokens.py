import time

import jwt
import pytest

from nagoyameshi.auth.jwt_tokens import JwtConfig, SessionClaims, decode_session_token, encode_session_token

CFG = JwtConfig(secret="s" * 32, issuer="nagoyameshi-api", audience="nagoyameshi-member", ttl_seconds=60)


def raw_token(**overrides) -> str:
    now = int(time.time())
    payload = {
        "sub": "1",
        "sid": "abc",
        "iat": now,
        "exp": now + 60,
        "iss": CFG.issuer,
        "aud": CFG.audience,
        "typ": "session",
    }
    payload.update(overrides)
    return jwt.encode(payload, CFG.secret, algorithm="HS256")


def test_claims_survive_encoding():
    claims = SessionClaims(subject_id=7, sid="f00d")
    assert decode_session_token(CFG, encode_session_token(CFG, claims)) == claims


def test_other_realm_audience_is_rejected():
    admin_cfg = JwtConfig(secret=CFG.secret, issuer=CFG.issuer, audience="nagoyameshi-admin", ttl_seconds=60)
    token = encode_session_token(admin_cfg, SessionClaims(subject_id=1, sid="x"))
    with pytest.raises(jwt.InvalidAudienceError):
        decode_session_token(CFG, token)


@pytest.mark.parametrize("overrides", [{"typ": "access"}, {"sub": "admin"}, {"exp": int(time.time()) - 10}])
def test_foreign_or_stale_tokens_are_rejected(overrides):
    with pytest.raises(jwt.PyJWTError):
        decode_session_token(CFG, raw_token(**overrides))
