"""
todos/models.py -- Domain dataclasses for todos, managers and comments.

These are pure data containers with zero logic. Ownership rules live in
todos/managers.py; persistence lives in todos/store.py.

id is None on every record before it is written to the database.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Todo:
    """A task owned by exactly one creator account.

    creator_id is Optional because the creator reference can be missing
    (e.g. rows imported without an owner). Ownership checks treat a missing
    creator as InvalidCreator rather than guessing.
    """

    title: str
    contents: str
    creator_id: Optional[int]
    weather: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    modified_at: str = ""  # ISO 8601, set by store on insert and update


@dataclass
class Manager:
    """One account assigned as a manager of one todo."""

    account_id: int
    todo_id: int
    id: Optional[int] = None


@dataclass
class Comment:
    contents: str
    account_id: int
    todo_id: int
    id: Optional[int] = None
    created_at: str = ""


@dataclass
class Page:
    """One page of todos. page is 1-based."""

    items: list[Todo] = field(default_factory=list)
    page: int = 1
    size: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size
