"""
todos/store.py -- SQLAlchemy-backed persistence layer for todos, managers and comments.

Uses SQLAlchemy Core (not ORM) so the dataclasses in todos/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. TodoStore is the repository (one clean
interface per entity). The _row_to_* functions are the mappers. Services never
touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = TodoStore("sqlite:///:memory:")
    todo_id = store.create_todo(Todo(title="Ship", contents="v1", creator_id=1))
    manager_id = store.create_manager(Manager(account_id=2, todo_id=todo_id))
    store.delete_manager(manager_id)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, func, select
from sqlalchemy.engine import Engine

from core.config import get_settings
from todos.models import Comment, Manager, Todo

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_todos = Table(
    "todos",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("contents", Text, nullable=False),
    Column("weather", String(100)),
    Column("creator_id", Integer),  # NULL = creator reference missing
    Column("created_at", String(32), nullable=False),
    Column("modified_at", String(32), nullable=False),
)

_managers = Table(
    "managers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_id", Integer, nullable=False),
    Column("todo_id", Integer, nullable=False, index=True),
)

_comments = Table(
    "comments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("contents", Text, nullable=False),
    Column("account_id", Integer, nullable=False),
    Column("todo_id", Integer, nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TodoStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # SQLite requires check_same_thread=False when used from FastAPI's
            # thread pool, where one pooled connection may serve several threads.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Todos
    # ------------------------------------------------------------------

    def create_todo(self, todo: Todo) -> int:
        """Insert a new todo and return its assigned database ID."""
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _todos.insert().values(
                    title=todo.title,
                    contents=todo.contents,
                    weather=todo.weather,
                    creator_id=todo.creator_id,
                    created_at=now,
                    modified_at=now,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_todo(self, todo_id: int) -> Optional[Todo]:
        """Fetch a single todo by ID. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_todos.select().where(_todos.c.id == todo_id)).fetchone()
        return _row_to_todo(row) if row is not None else None

    def list_todos(self, offset: int, limit: int) -> list[Todo]:
        """Return todos most recently modified first. Ties break on newest id."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _todos.select()
                .order_by(_todos.c.modified_at.desc(), _todos.c.id.desc())
                .offset(offset)
                .limit(limit)
            ).fetchall()
        return [_row_to_todo(r) for r in rows]

    def count_todos(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_todos)).scalar()
        return result or 0

    # ------------------------------------------------------------------
    # Managers
    # ------------------------------------------------------------------

    def create_manager(self, manager: Manager) -> int:
        """Insert a manager assignment and return its ID.

        The store does not check ownership. Callers go through
        todos.managers.assign_manager().
        """
        with self.engine.connect() as conn:
            result = conn.execute(_managers.insert().values(account_id=manager.account_id, todo_id=manager.todo_id))
            conn.commit()
            return result.inserted_primary_key[0]

    def get_manager(self, manager_id: int) -> Optional[Manager]:
        with self.engine.connect() as conn:
            row = conn.execute(_managers.select().where(_managers.c.id == manager_id)).fetchone()
        return _row_to_manager(row) if row is not None else None

    def list_managers(self, todo_id: int) -> list[Manager]:
        """Return every manager of a todo in assignment order."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _managers.select().where(_managers.c.todo_id == todo_id).order_by(_managers.c.id)
            ).fetchall()
        return [_row_to_manager(r) for r in rows]

    def delete_manager(self, manager_id: int) -> bool:
        """Delete a manager assignment. Returns True if a row was removed."""
        with self.engine.connect() as conn:
            result = conn.execute(_managers.delete().where(_managers.c.id == manager_id))
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def create_comment(self, comment: Comment) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(
                _comments.insert().values(
                    contents=comment.contents,
                    account_id=comment.account_id,
                    todo_id=comment.todo_id,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        with self.engine.connect() as conn:
            row = conn.execute(_comments.select().where(_comments.c.id == comment_id)).fetchone()
        return _row_to_comment(row) if row is not None else None

    def list_comments(self, todo_id: int) -> list[Comment]:
        """Return all comments on a todo, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _comments.select().where(_comments.c.todo_id == todo_id).order_by(_comments.c.id)
            ).fetchall()
        return [_row_to_comment(r) for r in rows]

    def delete_comments(self, todo_id: int) -> int:
        """Delete every comment on a todo. Returns the number removed."""
        with self.engine.connect() as conn:
            result = conn.execute(_comments.delete().where(_comments.c.todo_id == todo_id))
            conn.commit()
        return result.rowcount

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_todo(row) -> Todo:
    return Todo(
        id=row.id,
        title=row.title,
        contents=row.contents,
        weather=row.weather,
        creator_id=row.creator_id,
        created_at=row.created_at,
        modified_at=row.modified_at,
    )


def _row_to_manager(row) -> Manager:
    return Manager(id=row.id, account_id=row.account_id, todo_id=row.todo_id)


def _row_to_comment(row) -> Comment:
    return Comment(
        id=row.id,
        contents=row.contents,
        account_id=row.account_id,
        todo_id=row.todo_id,
        created_at=row.created_at,
    )
