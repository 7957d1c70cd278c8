"""
api/routes/v1/todos.py -- Todos, manager assignments and comments.

Routes (all require auth):
  POST   /api/v1/todos                                  -- create a todo (caller is creator)
  GET    /api/v1/todos?page=&size=                      -- newest-modified first
  GET    /api/v1/todos/{todo_id}
  POST   /api/v1/todos/{todo_id}/managers               -- creator only
  GET    /api/v1/todos/{todo_id}/managers
  DELETE /api/v1/todos/{todo_id}/managers/{manager_id}  -- creator only
  POST   /api/v1/todos/{todo_id}/comments               -- creator or manager
  GET    /api/v1/todos/{todo_id}/comments

Ownership rules and their check order live in todos/managers.py; this module
only maps requests and responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from api.models import (
    CommentCreate,
    CommentResponse,
    ManagerCreate,
    ManagerResponse,
    TodoCreate,
    TodoPageResponse,
    TodoResponse,
)
from auth.dependencies import get_current_identity
from auth.models import AuthIdentity
from todos import managers as manager_policy
from todos import service as todo_service

router = APIRouter()


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


@router.post("/todos", response_model=TodoResponse, status_code=201)
def create_todo(
    request: Request,
    body: TodoCreate,
    identity: AuthIdentity = Depends(get_current_identity),
) -> TodoResponse:
    todo = todo_service.create_todo(request.app.state.todo_store, identity, body.title, body.contents, body.weather)
    return TodoResponse.from_todo(todo)


@router.get("/todos", response_model=TodoPageResponse)
def list_todos(
    request: Request,
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=todo_service.MAX_PAGE_SIZE),
    identity: AuthIdentity = Depends(get_current_identity),
) -> TodoPageResponse:
    result = todo_service.list_todos(request.app.state.todo_store, page, size)
    return TodoPageResponse(
        items=[TodoResponse.from_todo(t) for t in result.items],
        page=result.page,
        size=result.size,
        total=result.total,
        total_pages=result.total_pages,
    )


@router.get("/todos/{todo_id}", response_model=TodoResponse)
def get_todo(
    request: Request,
    todo_id: int,
    identity: AuthIdentity = Depends(get_current_identity),
) -> TodoResponse:
    return TodoResponse.from_todo(todo_service.get_todo(request.app.state.todo_store, todo_id))


# ---------------------------------------------------------------------------
# Managers
# ---------------------------------------------------------------------------


@router.post("/todos/{todo_id}/managers", response_model=ManagerResponse, status_code=201)
def assign_manager(
    request: Request,
    todo_id: int,
    body: ManagerCreate,
    identity: AuthIdentity = Depends(get_current_identity),
) -> ManagerResponse:
    """Assign a manager. Errors, in check order: todo_not_found, invalid_creator,
    not_creator, target_account_not_found, self_assignment.
    """
    manager = manager_policy.assign_manager(
        request.app.state.todo_store,
        request.app.state.account_store,
        identity,
        todo_id,
        body.manager_account_id,
    )
    return ManagerResponse.from_manager(manager)


@router.get("/todos/{todo_id}/managers", response_model=list[ManagerResponse])
def list_managers(
    request: Request,
    todo_id: int,
    identity: AuthIdentity = Depends(get_current_identity),
) -> list[ManagerResponse]:
    managers = manager_policy.list_managers(request.app.state.todo_store, todo_id)
    return [ManagerResponse.from_manager(m) for m in managers]


@router.delete("/todos/{todo_id}/managers/{manager_id}", status_code=204)
def remove_manager(
    request: Request,
    todo_id: int,
    manager_id: int,
    identity: AuthIdentity = Depends(get_current_identity),
) -> Response:
    """Remove a manager. Errors, in check order: account_not_found,
    todo_not_found, invalid_creator, not_creator, manager_not_found,
    manager_mismatch.
    """
    manager_policy.remove_manager(
        request.app.state.todo_store,
        request.app.state.account_store,
        identity.account_id,
        todo_id,
        manager_id,
    )
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@router.post("/todos/{todo_id}/comments", response_model=CommentResponse, status_code=201)
def save_comment(
    request: Request,
    todo_id: int,
    body: CommentCreate,
    identity: AuthIdentity = Depends(get_current_identity),
) -> CommentResponse:
    comment = todo_service.save_comment(request.app.state.todo_store, identity, todo_id, body.contents)
    return CommentResponse.from_comment(comment)


@router.get("/todos/{todo_id}/comments", response_model=list[CommentResponse])
def list_comments(
    request: Request,
    todo_id: int,
    identity: AuthIdentity = Depends(get_current_identity),
) -> list[CommentResponse]:
    comments = todo_service.list_comments(request.app.state.todo_store, todo_id)
    return [CommentResponse.from_comment(c) for c in comments]
