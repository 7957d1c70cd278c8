"""
todos/managers.py -- Ownership rules for assigning and removing todo managers.

Only the creator of a todo may add or remove its managers, and the creator can
never be a manager of their own todo.

The order of checks is part of the contract. Existence is checked before
ownership, and ownership before relationship consistency, so a given bad
request always fails with the same error:

  assign_manager:  TodoNotFound -> InvalidCreator -> NotCreator
                   -> TargetAccountNotFound -> SelfAssignment
  remove_manager:  AccountNotFound -> TodoNotFound -> InvalidCreator
                   -> NotCreator -> ManagerNotFound -> ManagerMismatch

Nothing is written until every check has passed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.errors import (
    AccountNotFound,
    InvalidCreator,
    ManagerMismatch,
    ManagerNotFound,
    NotCreator,
    SelfAssignment,
    TargetAccountNotFound,
    TodoNotFound,
)
from todos.models import Manager, Todo

if TYPE_CHECKING:
    from auth.models import AuthIdentity
    from auth.store import AccountStore
    from todos.store import TodoStore

logger = logging.getLogger("taskdesk.todos")


def _check_creator(todo: Todo, account_id: int) -> int:
    """Return the todo's creator id after confirming account_id is that creator."""
    if todo.creator_id is None:
        raise InvalidCreator()
    if todo.creator_id != account_id:
        raise NotCreator()
    return todo.creator_id


def assign_manager(
    todos: TodoStore,
    accounts: AccountStore,
    identity: AuthIdentity,
    todo_id: int,
    manager_account_id: int,
) -> Manager:
    """Assign manager_account_id as a manager of todo_id on behalf of identity."""
    todo = todos.get_todo(todo_id)
    if todo is None:
        raise TodoNotFound()

    creator_id = _check_creator(todo, identity.account_id)

    if accounts.get_by_id(manager_account_id) is None:
        raise TargetAccountNotFound()

    if manager_account_id == creator_id:
        raise SelfAssignment()

    manager = Manager(account_id=manager_account_id, todo_id=todo_id)
    manager.id = todos.create_manager(manager)
    logger.info("Manager assigned (todo_id=%s, account_id=%s, manager_id=%s)", todo_id, manager_account_id, manager.id)
    return manager


def remove_manager(
    todos: TodoStore,
    accounts: AccountStore,
    account_id: int,
    todo_id: int,
    manager_id: int,
) -> None:
    """Remove manager assignment manager_id from todo_id on behalf of account_id."""
    if accounts.get_by_id(account_id) is None:
        raise AccountNotFound()

    todo = todos.get_todo(todo_id)
    if todo is None:
        raise TodoNotFound()

    _check_creator(todo, account_id)

    manager = todos.get_manager(manager_id)
    if manager is None:
        raise ManagerNotFound()

    if manager.todo_id != todo.id:
        raise ManagerMismatch()

    todos.delete_manager(manager_id)
    logger.info("Manager removed (todo_id=%s, manager_id=%s)", todo_id, manager_id)


def list_managers(todos: TodoStore, todo_id: int) -> list[Manager]:
    if todos.get_todo(todo_id) is None:
        raise TodoNotFound()
    return todos.list_managers(todo_id)
