#!/usr/bin/env python3
"""
TaskDesk -- management CLI.

Bootstraps accounts without going through the HTTP API, e.g. to create the
first administrator on a fresh database.

Usage:
  python main.py create-account admin@example.com 'S3cretPass' --role ADMIN
  python main.py issue-token admin@example.com

Environment variables:
  SECRET_KEY     Signing key for issued tokens (32+ characters). Required unless DEBUG=true.
  DATABASE_URL   SQLAlchemy URL of the account database (default: sqlite:///./taskdesk.db).
"""

import argparse
import sys

from auth.models import AccountRole
from auth.service import AuthService
from auth.store import AccountStore
from auth.tokens import get_token_codec
from core.errors import TaskDeskError


def _create_account(args: argparse.Namespace) -> int:
    store = AccountStore()
    try:
        token = AuthService(store, get_token_codec()).signup(args.email, args.password, args.role)
    finally:
        store.close()
    print(f"  Account created for {args.email} ({args.role}).")
    print(f"  Bearer {token}")
    return 0


def _issue_token(args: argparse.Namespace) -> int:
    store = AccountStore()
    try:
        account = store.get_by_email(args.email)
    finally:
        store.close()
    if account is None:
        print(f"  [!] No account with email '{args.email}'.", file=sys.stderr)
        return 1
    token = get_token_codec().issue(account.id, account.email, account.role)
    print(f"  Bearer {token}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="taskdesk",
        description="TaskDesk account management.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py create-account admin@example.com 'S3cretPass' --role ADMIN
  python main.py issue-token admin@example.com
  SECRET_KEY=... DATABASE_URL=sqlite:///./prod.db python main.py issue-token ops@example.com
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    create = sub.add_parser("create-account", help="Create an account and print a bearer token for it")
    create.add_argument("email", help="Account email (unique, case-sensitive)")
    create.add_argument("password", help="Account password")
    create.add_argument(
        "--role",
        choices=[r.value for r in AccountRole],
        default=AccountRole.USER.value,
        help="Account role (default: USER)",
    )
    create.set_defaults(func=_create_account)

    issue = sub.add_parser("issue-token", help="Print a fresh bearer token for an existing account")
    issue.add_argument("email", help="Account email")
    issue.set_defaults(func=_issue_token)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except TaskDeskError as exc:
        print(f"  [!] {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
