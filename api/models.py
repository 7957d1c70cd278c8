"""
API request and response models for TaskDesk REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
todos/models.py, which own the internal domain representation. Route handlers
map between the two.

Separation of concerns: domain dataclasses = domain truth; api/ models = API contract.
"""

from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from auth.models import Account
from auth.passwords import MAX_PASSWORD_BYTES, exceeds_byte_limit
from todos.models import Comment, Manager, Todo

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"

# bcrypt rejects input beyond 72 bytes. _check_password_bytes covers multibyte
# input that fits the character cap.
_PASSWORD_MAX = 72


def _check_password_bytes(value: str) -> str:
    if exceeds_byte_limit(value):
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return value


# Password fields: 1-72 characters and at most 72 UTF-8 bytes. Never trimmed.
_Password = Annotated[str, Field(min_length=1, max_length=_PASSWORD_MAX), AfterValidator(_check_password_bytes)]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Uniform error envelope returned by every exception handler."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/v1/auth/signup.

    role is a plain string: an unknown value must surface as the
    invalid_role domain error, not as a generic 422. Neither password nor role
    is trimmed: a padded password must sign in exactly as it was registered,
    and a padded role is not a role.
    """

    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: _Password
    role: str = Field(default="USER", max_length=30)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        """Trim surrounding whitespace before the pattern check runs."""
        return value.strip() if isinstance(value, str) else value


class SigninRequest(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: _Password


class TokenResponse(BaseModel):
    """Returned by signup and signin.

    bearer_token is the ready-to-send header value ("Bearer <token>").
    """

    access_token: str
    token_type: str = "bearer"
    bearer_token: str
    expires_in: int


class MeResponse(BaseModel):
    account_id: int
    email: str
    role: str


class AccountResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    role: str
    created_at: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            email=account.email,
            role=account.role.value,
            created_at=account.created_at or "",
        )


class ChangePasswordRequest(BaseModel):
    old_password: _Password
    new_password: _Password


class RoleChangeRequest(BaseModel):
    role: str = Field(min_length=1, max_length=30)


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


class TodoCreate(BaseModel):
    """Request body for POST /api/v1/todos.

    weather is supplied by the caller; TaskDesk does not look it up.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    contents: str = Field(min_length=1, max_length=10000)
    weather: Optional[str] = Field(default=None, max_length=100)


class TodoResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    contents: str
    weather: Optional[str]
    creator_id: Optional[int]
    created_at: str
    modified_at: str

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoResponse":
        return cls(
            id=todo.id,
            title=todo.title,
            contents=todo.contents,
            weather=todo.weather,
            creator_id=todo.creator_id,
            created_at=todo.created_at,
            modified_at=todo.modified_at,
        )


class TodoPageResponse(BaseModel):
    items: list[TodoResponse]
    page: int
    size: int
    total: int
    total_pages: int


# ---------------------------------------------------------------------------
# Managers
# ---------------------------------------------------------------------------


class ManagerCreate(BaseModel):
    """Request body for POST /api/v1/todos/{todo_id}/managers."""

    manager_account_id: int = Field(gt=0)


class ManagerResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    account_id: int
    todo_id: int

    @classmethod
    def from_manager(cls, manager: Manager) -> "ManagerResponse":
        return cls(id=manager.id, account_id=manager.account_id, todo_id=manager.todo_id)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    contents: str = Field(min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    contents: str
    account_id: int
    todo_id: int
    created_at: str

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            contents=comment.contents,
            account_id=comment.account_id,
            todo_id=comment.todo_id,
            created_at=comment.created_at,
        )


class DeletedResponse(BaseModel):
    deleted: int
