"""
api/routes/v1/users.py -- Account lookup and password change.

Routes:
  GET /api/v1/users/{account_id}  -- public profile of an account (requires auth)
  PUT /api/v1/users/password      -- change the caller's own password (requires auth)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import AccountResponse, ChangePasswordRequest
from api.routes.v1.auth import get_auth_service
from auth.dependencies import get_current_identity
from auth.models import AuthIdentity

router = APIRouter()


@router.get("/users/{account_id}", response_model=AccountResponse)
def get_account(
    request: Request,
    account_id: int,
    identity: AuthIdentity = Depends(get_current_identity),
) -> AccountResponse:
    account = get_auth_service(request).get_account(account_id)
    return AccountResponse.from_account(account)


@router.put("/users/password", status_code=204)
def change_password(
    request: Request,
    body: ChangePasswordRequest,
    identity: AuthIdentity = Depends(get_current_identity),
) -> Response:
    """Change the caller's password.

    Errors, in check order: account_not_found, weak_password (lists every
    unmet rule), same_password, invalid_credentials.
    """
    get_auth_service(request).change_password(identity.account_id, body.old_password, body.new_password)
    return Response(status_code=204)
