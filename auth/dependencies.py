"""
auth/dependencies.py -- FastAPI Depends() helpers for the access guard.

Every protected route depends on get_current_identity(), which:
  1. Reads the Authorization header and strips the "Bearer " prefix.
     No header, or a header that is not a bearer credential -> MissingToken.
  2. Verifies the token with the TokenCodec on app.state.
     Any failure (expired, bad signature, malformed) -> Unauthorized.
     The failure reason is logged at debug level and never returned.
  3. Stores a frozen AuthIdentity on request.state.identity for downstream use.

require_admin() wraps get_current_identity() and raises Forbidden unless the
identity's role is ADMIN.

Errors are core.errors types, not HTTPException; api/main.py renders them.

Layer rule: no imports from api/ or todos/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import AuthIdentity
from auth.tokens import IdentityClaims, TokenCodec
from core.errors import Forbidden, MissingToken, Unauthorized

logger = logging.getLogger("taskdesk.auth")

_BEARER_PREFIX = "Bearer "


def extract_bearer_token(header: str | None) -> str | None:
    """Return the raw token from an Authorization header value, or None."""
    if not header or not header.startswith(_BEARER_PREFIX):
        return None
    token = header[len(_BEARER_PREFIX) :].strip()
    return token or None


def get_current_identity(request: Request) -> AuthIdentity:
    """Require a valid bearer token. Raises MissingToken or Unauthorized.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(identity: AuthIdentity = Depends(get_current_identity)): ...
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise MissingToken()

    codec: TokenCodec = request.app.state.token_codec
    result = codec.verify(token)
    if not isinstance(result, IdentityClaims):
        logger.debug("Token rejected on %s (%s)", request.url.path, result.reason)
        raise Unauthorized()

    identity = AuthIdentity(account_id=result.account_id, email=result.email, role=result.role)
    request.state.identity = identity
    return identity


def require_admin(request: Request) -> AuthIdentity:
    """Require the ADMIN role. Raises 401-class errors first, then Forbidden.

    Use as a FastAPI dependency:
        @router.patch("/admin-only")
        async def route(identity: AuthIdentity = Depends(require_admin)): ...
    """
    identity = get_current_identity(request)
    if not identity.is_admin:
        raise Forbidden()
    return identity
