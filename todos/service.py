"""
todos/service.py -- Todo and comment operations.

Thin orchestration over TodoStore. The only rule beyond lookups is who may
comment: the todo's creator or one of its managers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.errors import NotManager, TodoNotFound
from todos.models import Comment, Page, Todo

if TYPE_CHECKING:
    from auth.models import AuthIdentity
    from todos.store import TodoStore

MAX_PAGE_SIZE = 100


def create_todo(
    store: TodoStore,
    identity: AuthIdentity,
    title: str,
    contents: str,
    weather: str | None = None,
) -> Todo:
    todo = Todo(title=title, contents=contents, weather=weather, creator_id=identity.account_id)
    todo_id = store.create_todo(todo)
    return store.get_todo(todo_id)


def get_todo(store: TodoStore, todo_id: int) -> Todo:
    todo = store.get_todo(todo_id)
    if todo is None:
        raise TodoNotFound()
    return todo


def list_todos(store: TodoStore, page: int = 1, size: int = 10) -> Page:
    """Return one page of todos, most recently modified first.

    page is 1-based; values below 1 are treated as 1. size is clamped to
    [1, MAX_PAGE_SIZE].
    """
    page = max(page, 1)
    size = min(max(size, 1), MAX_PAGE_SIZE)
    items = store.list_todos(offset=(page - 1) * size, limit=size)
    return Page(items=items, page=page, size=size, total=store.count_todos())


def save_comment(store: TodoStore, identity: AuthIdentity, todo_id: int, contents: str) -> Comment:
    todo = get_todo(store, todo_id)
    if todo.creator_id != identity.account_id:
        manager_ids = {m.account_id for m in store.list_managers(todo_id)}
        if identity.account_id not in manager_ids:
            raise NotManager()

    comment = Comment(contents=contents, account_id=identity.account_id, todo_id=todo_id)
    comment_id = store.create_comment(comment)
    return store.get_comment(comment_id)


def list_comments(store: TodoStore, todo_id: int) -> list[Comment]:
    get_todo(store, todo_id)
    return store.list_comments(todo_id)


def delete_comments(store: TodoStore, todo_id: int) -> int:
    """Administrator operation: remove every comment on a todo."""
    get_todo(store, todo_id)
    return store.delete_comments(todo_id)
