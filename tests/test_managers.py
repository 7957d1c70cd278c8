"""
tests/test_managers.py -- Ownership rules for manager assignment and removal.

The order of checks is part of the contract: when a request is wrong in more
than one way, the error raised must be the first one in the documented order.
"""

from __future__ import annotations

import pytest

from auth.models import Account, AccountRole, AuthIdentity
from auth.store import AccountStore
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
from todos import managers
from todos.models import Todo
from todos.store import TodoStore


def _account(store: AccountStore, email: str) -> AuthIdentity:
    account_id = store.create_account(Account(email=email, hashed_password="unused"))
    return AuthIdentity(account_id=account_id, email=email, role=AccountRole.USER)


def _todo(store: TodoStore, creator_id) -> int:
    return store.create_todo(Todo(title="Ship", contents="v1", creator_id=creator_id))


@pytest.fixture
def people(account_store: AccountStore) -> dict[str, AuthIdentity]:
    return {
        "creator": _account(account_store, "creator@example.com"),
        "helper": _account(account_store, "helper@example.com"),
        "stranger": _account(account_store, "stranger@example.com"),
    }


class TestAssignManager:
    def test_creator_assigns_manager(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, people["creator"].account_id)
        manager = managers.assign_manager(
            todo_store, account_store, people["creator"], todo_id, people["helper"].account_id
        )
        assert manager.id is not None
        assert manager.todo_id == todo_id
        assert manager.account_id == people["helper"].account_id
        assert todo_store.list_managers(todo_id) == [manager]

    def test_missing_todo(self, todo_store, account_store, people) -> None:
        with pytest.raises(TodoNotFound):
            managers.assign_manager(todo_store, account_store, people["creator"], 999, 12345)

    def test_todo_without_creator(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, None)
        with pytest.raises(InvalidCreator):
            managers.assign_manager(todo_store, account_store, people["creator"], todo_id, 12345)

    def test_non_creator_is_rejected_before_target_lookup(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, people["creator"].account_id)
        with pytest.raises(NotCreator):
            managers.assign_manager(todo_store, account_store, people["stranger"], todo_id, 12345)

    def test_missing_target_account(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, people["creator"].account_id)
        with pytest.raises(TargetAccountNotFound):
            managers.assign_manager(todo_store, account_store, people["creator"], todo_id, 12345)

    def test_creator_cannot_manage_own_todo(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, people["creator"].account_id)
        with pytest.raises(SelfAssignment):
            managers.assign_manager(
                todo_store, account_store, people["creator"], todo_id, people["creator"].account_id
            )
        assert todo_store.list_managers(todo_id) == []

    def test_admin_role_does_not_bypass_ownership(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, people["creator"].account_id)
        admin = AuthIdentity(
            account_id=people["stranger"].account_id, email="stranger@example.com", role=AccountRole.ADMIN
        )
        with pytest.raises(NotCreator):
            managers.assign_manager(todo_store, account_store, admin, todo_id, people["helper"].account_id)


class TestRemoveManager:
    def _assigned(self, todo_store, account_store, people) -> tuple[int, int]:
        todo_id = _todo(todo_store, people["creator"].account_id)
        manager = managers.assign_manager(
            todo_store, account_store, people["creator"], todo_id, people["helper"].account_id
        )
        return todo_id, manager.id

    def test_creator_removes_manager(self, todo_store, account_store, people) -> None:
        todo_id, manager_id = self._assigned(todo_store, account_store, people)
        managers.remove_manager(todo_store, account_store, people["creator"].account_id, todo_id, manager_id)
        assert todo_store.get_manager(manager_id) is None

    def test_unknown_caller_is_checked_first(self, todo_store, account_store, people) -> None:
        with pytest.raises(AccountNotFound):
            managers.remove_manager(todo_store, account_store, 999, 999, 999)

    def test_missing_todo(self, todo_store, account_store, people) -> None:
        with pytest.raises(TodoNotFound):
            managers.remove_manager(todo_store, account_store, people["creator"].account_id, 999, 999)

    def test_todo_without_creator(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, None)
        with pytest.raises(InvalidCreator):
            managers.remove_manager(todo_store, account_store, people["creator"].account_id, todo_id, 999)

    def test_non_creator(self, todo_store, account_store, people) -> None:
        todo_id, manager_id = self._assigned(todo_store, account_store, people)
        with pytest.raises(NotCreator):
            managers.remove_manager(todo_store, account_store, people["helper"].account_id, todo_id, manager_id)
        assert todo_store.get_manager(manager_id) is not None

    def test_missing_manager(self, todo_store, account_store, people) -> None:
        todo_id = _todo(todo_store, people["creator"].account_id)
        with pytest.raises(ManagerNotFound):
            managers.remove_manager(todo_store, account_store, people["creator"].account_id, todo_id, 999)

    def test_manager_of_another_todo(self, todo_store, account_store, people) -> None:
        _todo_a, manager_id = self._assigned(todo_store, account_store, people)
        todo_b = _todo(todo_store, people["creator"].account_id)
        with pytest.raises(ManagerMismatch):
            managers.remove_manager(todo_store, account_store, people["creator"].account_id, todo_b, manager_id)
        assert todo_store.get_manager(manager_id) is not None


def test_end_to_end_assignment_flow(todo_store, account_store, people) -> None:
    """Creator A cannot assign itself but assigns B; C cannot remove B; A removes B once."""
    a, b, c = people["creator"], people["helper"], people["stranger"]
    todo_id = _todo(todo_store, a.account_id)

    with pytest.raises(SelfAssignment):
        managers.assign_manager(todo_store, account_store, a, todo_id, a.account_id)

    manager = managers.assign_manager(todo_store, account_store, a, todo_id, b.account_id)
    assert [m.account_id for m in managers.list_managers(todo_store, todo_id)] == [b.account_id]

    with pytest.raises(NotCreator):
        managers.remove_manager(todo_store, account_store, c.account_id, todo_id, manager.id)

    managers.remove_manager(todo_store, account_store, a.account_id, todo_id, manager.id)
    assert managers.list_managers(todo_store, todo_id) == []

    with pytest.raises(ManagerNotFound):
        managers.remove_manager(todo_store, account_store, a.account_id, todo_id, manager.id)


def test_list_managers_of_missing_todo(todo_store) -> None:
    with pytest.raises(TodoNotFound):
        managers.list_managers(todo_store, 999)
