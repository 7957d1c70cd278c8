"""
tests/test_audit.py -- Unit tests for the audited() decorator.

Sync handlers must stay sync so FastAPI runs them in the threadpool instead of
on the event loop; async handlers stay coroutines.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from types import SimpleNamespace

import pytest

from auth.audit import audited


def _request(path: str = "/api/v1/admin/users/2/role", account_id: int = 1):
    identity = SimpleNamespace(account_id=account_id, email="admin@example.com")
    return SimpleNamespace(url=SimpleNamespace(path=path), state=SimpleNamespace(identity=identity))


def _audit_messages(caplog) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.name == "taskdesk.audit"]


class TestSyncHandler:
    def test_wrapper_stays_sync(self) -> None:
        @audited("change_role")
        def handler(request):
            return "done"

        assert not inspect.iscoroutinefunction(handler)
        assert handler.__name__ == "handler"

    def test_records_entry_and_exit(self, caplog) -> None:
        @audited("change_role")
        def handler(request):
            return "done"

        with caplog.at_level(logging.INFO, logger="taskdesk.audit"):
            assert handler(request=_request()) == "done"

        messages = _audit_messages(caplog)
        assert len(messages) == 2
        assert "access granted account_id=1" in messages[0]
        assert "target=/api/v1/admin/users/2/role" in messages[0]
        assert "access released" in messages[1]
        assert "outcome=ok" in messages[1]

    def test_exit_record_names_the_error(self, caplog) -> None:
        @audited("delete_comments")
        def handler(request):
            raise LookupError("gone")

        with caplog.at_level(logging.INFO, logger="taskdesk.audit"):
            with pytest.raises(LookupError):
                handler(request=_request())

        assert "outcome=LookupError" in _audit_messages(caplog)[-1]


class TestAsyncHandler:
    def test_wrapper_stays_async(self, caplog) -> None:
        @audited("change_role")
        async def handler(request):
            return "done"

        assert inspect.iscoroutinefunction(handler)
        with caplog.at_level(logging.INFO, logger="taskdesk.audit"):
            assert asyncio.run(handler(request=_request())) == "done"
        assert len(_audit_messages(caplog)) == 2


def test_store_backed_routes_are_sync() -> None:
    """Route handlers that touch a blocking store are plain functions."""
    from api.routes.v1 import admin, todos, users

    handlers = [
        admin.change_role,
        admin.delete_comments,
        users.get_account,
        users.change_password,
        todos.create_todo,
        todos.list_todos,
        todos.get_todo,
        todos.assign_manager,
        todos.list_managers,
        todos.remove_manager,
        todos.save_comment,
        todos.list_comments,
    ]
    for handler in handlers:
        assert not inspect.iscoroutinefunction(handler), handler.__name__
