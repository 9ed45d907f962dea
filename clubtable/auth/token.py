"""Access token decoding

The gateway never verifies the signature: that is the backend's job. It
only reads the claims to know who is calling and whether the token is
still worth sending upstream.
"""

import time
from typing import Optional

from jose import JWTError, jwt
from pydantic import ValidationError as SchemaError

from clubtable.schemas.auth import (
    TokenClaims,
    TokenExpired,
    TokenMalformed,
    TokenOk,
    TokenResult,
)


def decode_token(token: Optional[str], now: Optional[float] = None) -> TokenResult:
    """Decode a bearer token into claims without raising"""
    if not token:
        return TokenMalformed(reason="empty token")

    try:
        payload = jwt.get_unverified_claims(token)
    except JWTError as e:
        return TokenMalformed(reason=str(e))

    try:
        claims = TokenClaims.model_validate(payload)
    except SchemaError as e:
        return TokenMalformed(reason=f"invalid claims: {e.error_count()} error(s)")

    current = time.time() if now is None else now
    if claims.exp <= current:
        return TokenExpired(expired_at=claims.exp)

    return TokenOk(claims=claims)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer ...`` header value"""
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()
