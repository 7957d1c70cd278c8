"""
auth/audit.py -- Access audit trail for administrator operations.

audited(action) wraps a route handler, sync or async. It writes one record
on entry and one on exit (in a finally block, so a handler that raises still
gets its exit record). Each record carries the acting account, a UTC
timestamp, the action name and the target path.

The decorated handler must accept `request: Request` and must depend on
require_admin, which puts the verified identity on request.state before the
handler body runs:

    @router.patch("/admin/users/{account_id}/role")
    @audited("change_role")
    def change_role(request: Request, ..., identity: AuthIdentity = Depends(require_admin)): ...

functools.wraps keeps the original signature visible to FastAPI's dependency
injection. A sync handler gets a sync wrapper so FastAPI still runs it in the
threadpool.

Records go to the "taskdesk.audit" logger so deployments can route them to a
separate sink.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from fastapi import Request

audit_logger = logging.getLogger("taskdesk.audit")

_Handler = TypeVar("_Handler", bound=Callable[..., Any])


def _actor(request: Request) -> tuple[Any, Any]:
    identity = getattr(request.state, "identity", None)
    if identity is None:
        return None, None
    return identity.account_id, identity.email


def _enter(action: str, request: Request) -> tuple[Any, str]:
    account_id, email = _actor(request)
    target = request.url.path
    audit_logger.info(
        "[%s] access granted account_id=%s email=%s action=%s target=%s",
        datetime.now(timezone.utc).isoformat(),
        account_id,
        email,
        action,
        target,
    )
    return account_id, target


def _release(action: str, account_id: Any, target: str, outcome: str) -> None:
    audit_logger.info(
        "[%s] access released account_id=%s action=%s target=%s outcome=%s",
        datetime.now(timezone.utc).isoformat(),
        account_id,
        action,
        target,
        outcome,
    )


def audited(action: str) -> Callable[[_Handler], _Handler]:
    def decorator(func: _Handler) -> _Handler:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                account_id, target = _enter(action, kwargs["request"])
                outcome = "ok"
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    outcome = type(exc).__name__
                    raise
                finally:
                    _release(action, account_id, target, outcome)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            account_id, target = _enter(action, kwargs["request"])
            outcome = "ok"
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                outcome = type(exc).__name__
                raise
            finally:
                _release(action, account_id, target, outcome)

        return wrapper  # type: ignore[return-value]

    return decorator
