"""
api/routes/v1/admin.py -- Administrator-only endpoints.

Routes:
  PATCH  /api/v1/admin/users/{account_id}/role     -- change an account's role
  DELETE /api/v1/admin/todos/{todo_id}/comments    -- delete every comment on a todo

Both routes depend on require_admin (401 without a valid token, 403 for a
non-admin) and are wrapped in audited(), which logs an access record on entry
and on exit to the taskdesk.audit logger.

Decorator order matters: @router.* must be outermost so FastAPI registers the
audited wrapper; functools.wraps keeps the original signature for injection.
"""

from fastapi import APIRouter, Depends, Request

from api.models import AccountResponse, DeletedResponse, RoleChangeRequest
from api.routes.v1.auth import get_auth_service
from auth.audit import audited
from auth.dependencies import require_admin
from auth.models import AuthIdentity
from todos import service as todo_service

# Auth policy: every route in this module requires admin (require_admin).
router = APIRouter()


@router.patch("/admin/users/{account_id}/role", response_model=AccountResponse)
@audited("change_role")
def change_role(
    request: Request,
    account_id: int,
    body: RoleChangeRequest,
    identity: AuthIdentity = Depends(require_admin),
) -> AccountResponse:
    """Replace an account's role. Errors: account_not_found (404), invalid_role (400)."""
    account = get_auth_service(request).change_role(account_id, body.role)
    return AccountResponse.from_account(account)


@router.delete("/admin/todos/{todo_id}/comments", response_model=DeletedResponse)
@audited("delete_comments")
def delete_comments(
    request: Request,
    todo_id: int,
    identity: AuthIdentity = Depends(require_admin),
) -> DeletedResponse:
    """Delete every comment on a todo. Errors: todo_not_found (404)."""
    deleted = todo_service.delete_comments(request.app.state.todo_store, todo_id)
    return DeletedResponse(deleted=deleted)
