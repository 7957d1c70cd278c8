"""
auth/service.py -- Signup, signin, password change and role change.

AuthService orchestrates the account store, the password hasher and the token
codec. It raises typed errors from core.errors and never builds HTTP
responses; api/ translates the errors.

Security:
  signin() returns the same InvalidCredentials error for an unknown email and
  for a wrong password, and runs bcrypt in both cases (against DUMMY_HASH when
  the email is unknown) so neither the message nor the response time reveals
  whether an account exists.

  change_password() checks, in order: account exists, new password meets the
  policy, new password differs from the current one, old password verifies.

Layer rule: no imports from api/ or todos/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import Account, AccountRole
from auth.passwords import (
    DUMMY_HASH,
    MAX_PASSWORD_BYTES,
    check_password_policy,
    exceeds_byte_limit,
    hash_password,
    verify_password,
)
from auth.store import AccountStore
from auth.tokens import TokenCodec
from core.errors import (
    AccountNotFound,
    DuplicateAccount,
    InvalidCredentials,
    SamePassword,
    WeakPassword,
)

logger = logging.getLogger("taskdesk.auth")


class AuthService:
    def __init__(self, accounts: AccountStore, codec: TokenCodec) -> None:
        self.accounts = accounts
        self.codec = codec

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def signup(self, email: str, password: str, role: AccountRole | str = AccountRole.USER) -> str:
        """Create an account and return a bearer token for it."""
        if self.accounts.exists_by_email(email):
            raise DuplicateAccount()

        parsed_role = AccountRole.parse(role)
        if exceeds_byte_limit(password):
            # Signup skips the full policy but bcrypt cannot hash this.
            raise WeakPassword([f"at most {MAX_PASSWORD_BYTES} bytes"])
        account = Account(email=email, hashed_password=hash_password(password), role=parsed_role)
        try:
            account_id = self.accounts.create_account(account)
        except IntegrityError as exc:
            # Lost a concurrent signup race on the unique email index.
            raise DuplicateAccount() from exc

        logger.info("Account created (account_id=%s, role=%s)", account_id, parsed_role.value)
        return self.codec.issue(account_id, email, parsed_role)

    def signin(self, email: str, password: str) -> str:
        """Verify credentials and return a fresh bearer token."""
        account = self.accounts.get_by_email(email)
        if account is None:
            # Equalize timing -- do NOT return before running bcrypt.
            verify_password(password, DUMMY_HASH)
            raise InvalidCredentials()
        if not verify_password(password, account.hashed_password):
            raise InvalidCredentials()
        return self.codec.issue(account.id, account.email, account.role)

    # ------------------------------------------------------------------
    # Account management
    # ------------------------------------------------------------------

    def get_account(self, account_id: int) -> Account:
        account = self.accounts.get_by_id(account_id)
        if account is None:
            raise AccountNotFound()
        return account

    def change_password(self, account_id: int, old_password: str, new_password: str) -> None:
        account = self.get_account(account_id)

        unmet = check_password_policy(new_password)
        if unmet:
            raise WeakPassword(unmet)

        if verify_password(new_password, account.hashed_password):
            raise SamePassword()

        if not verify_password(old_password, account.hashed_password):
            raise InvalidCredentials()

        self.accounts.update_account(account_id, hashed_password=hash_password(new_password))
        logger.info("Password changed (account_id=%s)", account_id)

    def change_role(self, account_id: int, role: AccountRole | str) -> Account:
        """Administrator operation: replace an account's role."""
        self.get_account(account_id)
        parsed_role = AccountRole.parse(role)
        self.accounts.update_account(account_id, role=parsed_role)
        logger.info("Role changed (account_id=%s, role=%s)", account_id, parsed_role.value)
        return self.get_account(account_id)
