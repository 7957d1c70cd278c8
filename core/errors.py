"""
core/errors.py -- Typed, recoverable domain errors for TaskDesk.

Services in auth/ and todos/ raise these; they never raise HTTPException.
api/main.py owns the single exception handler that turns a TaskDeskError into
the {"error": {"code", "message"}} envelope, using status_code from the class.

Three families:
  ValidationError  -- caller-correctable input (400, DuplicateAccount is 409)
  NotFoundError    -- resource absent (404)
  AuthError        -- authentication (401) and authorization (403) failures

Messages are written for API clients. They must never carry stack traces,
SQL, or a hint about which half of a credential pair was wrong.

Layer rule: core/ is the kernel. No imports from api/, auth/, or todos/.
"""

from __future__ import annotations


class TaskDeskError(Exception):
    """Base class for every error a caller is expected to handle."""

    status_code: int = 400
    code: str = "error"
    message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationError(TaskDeskError):
    status_code = 400
    code = "validation_error"


class DuplicateAccount(ValidationError):
    status_code = 409
    code = "duplicate_account"
    message = "An account with that email already exists."


class WeakPassword(ValidationError):
    """Raised with every unmet password rule, not just the first."""

    code = "weak_password"

    def __init__(self, unmet: list[str]) -> None:
        self.unmet = list(unmet)
        super().__init__("New password does not meet the policy: " + "; ".join(self.unmet) + ".")


class SamePassword(ValidationError):
    code = "same_password"
    message = "New password must differ from the current password."


class InvalidRole(ValidationError):
    code = "invalid_role"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown role: {value!r}.")


class SelfAssignment(ValidationError):
    code = "self_assignment"
    message = "The creator of a todo cannot be assigned as its manager."


class ManagerMismatch(ValidationError):
    code = "manager_mismatch"
    message = "That manager is not assigned to this todo."


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class NotFoundError(TaskDeskError):
    status_code = 404
    code = "not_found"
    message = "Resource not found."


class AccountNotFound(NotFoundError):
    code = "account_not_found"
    message = "Account not found."


class TodoNotFound(NotFoundError):
    code = "todo_not_found"
    message = "Todo not found."


class ManagerNotFound(NotFoundError):
    code = "manager_not_found"
    message = "Manager not found."


class TargetAccountNotFound(NotFoundError):
    code = "target_account_not_found"
    message = "The account to assign as manager does not exist."


# ---------------------------------------------------------------------------
# Authentication / authorization
# ---------------------------------------------------------------------------


class AuthError(TaskDeskError):
    status_code = 401
    code = "unauthorized"
    message = "Authentication required."


class InvalidCredentials(AuthError):
    # Shared by "no such email" and "wrong password" to prevent enumeration.
    code = "invalid_credentials"
    message = "Invalid email or password."


class MissingToken(AuthError):
    code = "missing_token"
    message = "A bearer token is required."


class Unauthorized(AuthError):
    # Shared by expired, malformed, and badly signed tokens.
    code = "unauthorized"
    message = "Invalid or expired token."


class Forbidden(AuthError):
    status_code = 403
    code = "forbidden"
    message = "Admin access required."


class NotCreator(AuthError):
    status_code = 403
    code = "not_creator"
    message = "Only the creator of this todo can manage its managers."


class InvalidCreator(AuthError):
    status_code = 403
    code = "invalid_creator"
    message = "The creator of this todo is not valid."


class NotManager(AuthError):
    status_code = 403
    code = "not_manager"
    message = "Not a manager of this todo."
