"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, near-zero logic). Mirrors the
approach in todos/models.py -- dataclasses own domain shape; stores and
services do the work.

Layer rule: no imports from api/ or todos/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.errors import InvalidRole


class AccountRole(str, Enum):
    """Closed set of account roles.

    parse() is the only way a free-form string becomes a role. It accepts the
    exact member name and nothing else -- "admin" or " ADMIN" are rejected.
    """

    USER = "USER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: object) -> "AccountRole":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls.__members__:
            return cls[value]
        raise InvalidRole(value)


@dataclass
class Account:
    """A registered TaskDesk account.

    email is unique and compared case-sensitively, exactly as stored.
    hashed_password is a bcrypt digest; the plaintext is never kept.

    id is None before the record is written to the database.
    """

    email: str
    hashed_password: str
    role: AccountRole = AccountRole.USER
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class AuthIdentity:
    """The verified caller attached to request.state by the access guard.

    Frozen so route and service code can read it but never rewrite who the
    caller is.
    """

    account_id: int
    email: str
    role: AccountRole

    @property
    def is_admin(self) -> bool:
        return self.role is AccountRole.ADMIN
