"""
api/routes/v1/auth.py -- Signup, signin and current-identity endpoints.

Routes:
  POST /api/v1/auth/signup   -- create an account; returns a bearer token (public)
  POST /api/v1/auth/signin   -- password signin; returns a bearer token (public)
  GET  /api/v1/auth/me       -- identity carried by the caller's token (requires auth)

Security:
  POST /signin is rate-limited per client address (SIGNIN_RATE_LIMIT).
  AuthService.signin() equalizes timing and returns one error for both
  unknown email and wrong password -- never inline the lookup here.
  Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import MeResponse, SigninRequest, SignupRequest, TokenResponse
from auth.dependencies import get_current_identity
from auth.models import AuthIdentity
from auth.service import AuthService
from core.config import get_settings

# Auth policy:
# - POST /api/v1/auth/signup:  public
# - POST /api/v1/auth/signin:  public, rate-limited
# - GET  /api/v1/auth/me:      requires auth (get_current_identity)
router = APIRouter()


def get_auth_service(request: Request) -> AuthService:
    return AuthService(request.app.state.account_store, request.app.state.token_codec)


def _token_response(request: Request, token: str, status_code: int) -> JSONResponse:
    resp = JSONResponse(
        status_code=status_code,
        content=TokenResponse(
            access_token=token,
            token_type="bearer",  # noqa: S106 # nosec B106 -- OAuth token type, not a password
            bearer_token=f"Bearer {token}",
            expires_in=request.app.state.token_codec.expire_seconds,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/signup", response_model=TokenResponse, status_code=201)
def signup(request: Request, body: SignupRequest) -> JSONResponse:
    """Register an account and sign it in.

    Errors: duplicate_account (409), invalid_role (400).
    """
    token = get_auth_service(request).signup(body.email, body.password, body.role)
    return _token_response(request, token, 201)


@limiter.limit(get_settings().signin_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/signin", response_model=TokenResponse)
def signin(request: Request, body: SigninRequest) -> JSONResponse:
    """Authenticate with email and password.

    Returns the same invalid_credentials error (401) for an unknown email and
    for a wrong password.
    """
    token = get_auth_service(request).signin(body.email, body.password)
    return _token_response(request, token, 200)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/me", response_model=MeResponse)
async def me(identity: AuthIdentity = Depends(get_current_identity)) -> MeResponse:
    """Return the identity carried by the caller's token."""
    return MeResponse(account_id=identity.account_id, email=identity.email, role=identity.role.value)
