"""
auth/tokens.py -- Bearer token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       account_id, email, role, iat and exp as integer epoch seconds. Any edit
       to the header or claims segment breaks the signature.

  Verification never raises. TokenCodec.verify() returns either the claims or
       a VerificationFailure carrying a reason ("malformed", "bad_signature",
       "expired", "invalid_claims"). The reason is for server-side logs only;
       the access guard reports every failure to the client identically.

  Expiry is checked here rather than by jose so that callers (and tests) can
       pass an explicit "now". A token is rejected once now > exp.

  Determinism: with a fixed key, fixed claims and a fixed issued_at the token
       is byte-identical on every call. jose sorts header keys and the claims
       dict is built in a fixed order, and HMAC has no random input.

  SECRET_KEY: sourced from core.config.get_settings(). The Settings class
       validates the key at startup; get_token_codec() is called from the API
       lifespan so a bad key stops the process before it serves traffic.

Layer rule: no imports from api/ or todos/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError

from auth.models import AccountRole
from core.config import get_settings
from core.errors import InvalidRole

logger = logging.getLogger("taskdesk.auth")

ALGORITHM = "HS256"


def _epoch_now() -> int:
    return int(datetime.now(timezone.utc).timestamp())


@dataclass(frozen=True)
class IdentityClaims:
    """Identity payload of a verified token. Reconstructed, never persisted."""

    account_id: int
    email: str
    role: AccountRole
    issued_at: int
    expires_at: int


@dataclass(frozen=True)
class VerificationFailure:
    """Why a token was rejected. Never shown to the client."""

    reason: str


class TokenCodec:
    """Signs and verifies self-contained bearer tokens with one symmetric key.

    Instances are immutable after construction and safe to share across
    threads -- issue() and verify() are pure functions of their arguments,
    the key and the TTL.

    Usage:
        codec = TokenCodec(secret_key, expire_seconds=3600)
        token = codec.issue(1, "a@example.com", AccountRole.USER)
        result = codec.verify(token)
        if isinstance(result, IdentityClaims): ...
    """

    def __init__(self, secret_key: str, expire_seconds: int) -> None:
        if not secret_key:
            raise ValueError("TokenCodec requires a signing key.")
        if expire_seconds <= 0:
            raise ValueError("expire_seconds must be positive.")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(
        self,
        account_id: int,
        email: str,
        role: AccountRole | str,
        issued_at: int | None = None,
    ) -> str:
        """Encode a signed JWT for the given identity.

        issued_at defaults to the current UTC epoch second. Tests pass a fixed
        (or long past) value to get reproducible or already-expired tokens.
        Raises InvalidRole for a role that verify() would never accept.
        """
        iat = _epoch_now() if issued_at is None else int(issued_at)
        role_value = AccountRole.parse(role).value
        payload = {
            "sub": str(account_id),
            "account_id": account_id,
            "email": email,
            "role": role_value,
            "iat": iat,
            "exp": iat + self.expire_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str, now: int | None = None) -> IdentityClaims | VerificationFailure:
        """Decode and verify a JWT. Returns the claims or a VerificationFailure."""
        try:
            jwt.get_unverified_header(token)
        except JWTError:
            return VerificationFailure("malformed")

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTClaimsError:
            return VerificationFailure("invalid_claims")
        except JWTError:
            return VerificationFailure("bad_signature")

        try:
            claims = IdentityClaims(
                account_id=int(payload["account_id"]),
                email=str(payload["email"]),
                role=AccountRole.parse(payload["role"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError, InvalidRole):
            return VerificationFailure("invalid_claims")

        current = _epoch_now() if now is None else now
        if current > claims.expires_at:
            return VerificationFailure("expired")
        return claims


@lru_cache
def get_token_codec() -> TokenCodec:
    """Return the process-wide TokenCodec built from Settings.

    Raises (via Settings validation) when the signing key is missing or too
    short. Call get_token_codec.cache_clear() together with
    get_settings.cache_clear() in tests that swap configuration.
    """
    settings = get_settings()
    return TokenCodec(settings.secret_key, settings.token_expire_seconds)
