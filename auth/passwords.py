"""
auth/passwords.py -- Password hashing and the password policy.

Hashing: bcrypt used directly (no passlib wrapper). bcrypt.gensalt() draws a
fresh random salt on every call, so hashing the same password twice yields two
different digests that both verify. bcrypt.checkpw compares in constant time.

Policy: a new password must be at least 8 characters long, contain at least
one digit and one uppercase letter, and fit in bcrypt's 72-byte input limit.
bcrypt 5 raises on longer input where older releases truncated, so the byte
limit is enforced here for every bcrypt release. check_password_policy()
reports every unmet rule at once so the caller can show the full list.

Layer rule: no imports from api/ or todos/.
"""

from __future__ import annotations

import re
from collections.abc import Callable

import bcrypt

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72

_DIGIT_RE = re.compile(r"\d")
_UPPER_RE = re.compile(r"[A-Z]")


def exceeds_byte_limit(password: str) -> bool:
    """Return True if password is longer than bcrypt accepts (72 UTF-8 bytes)."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


_RULES: tuple[tuple[str, Callable[[str], bool]], ...] = (
    (f"at least {MIN_PASSWORD_LENGTH} characters", lambda p: len(p) >= MIN_PASSWORD_LENGTH),
    ("at least one digit", lambda p: _DIGIT_RE.search(p) is not None),
    ("at least one uppercase letter", lambda p: _UPPER_RE.search(p) is not None),
    (f"at most {MAX_PASSWORD_BYTES} bytes", lambda p: not exceeds_byte_limit(p)),
)


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises ValueError for input over MAX_PASSWORD_BYTES. Callers check
    exceeds_byte_limit() first; the API layer rejects such passwords with 422.
    """
    if exceeds_byte_limit(plain):
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A mismatch is not an error. An unparseable digest, or a password over the
    byte limit, also returns False.
    """
    if exceeds_byte_limit(plain):
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def check_password_policy(password: str) -> list[str]:
    """Return the unmet policy rules for password, in a fixed order.

    An empty list means the password is acceptable.
    """
    return [label for label, ok in _RULES if not ok(password)]


# Timing equalization dummy hash.
# Computed once at module load. signin verifies against it when the email is
# unknown so that response time does not reveal whether an account exists.
DUMMY_HASH: str = hash_password("taskdesk_timing_dummy")
