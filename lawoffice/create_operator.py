"""Create a dashboard operator account.

Usage:
    python -m lawoffice.create_operator USERNAME
    python -m lawoffice.create_operator USERNAME --password-stdin < secret.txt
"""
import argparse
import getpass
import sys

from lawoffice.auth.passwords import hash_password
from lawoffice.database import SessionLocal, init_database
from lawoffice.routes.auth_routes import RegisterRequest
from lawoffice.storage import ConflictError, DatabaseStorage


def _read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        raise SystemExit("Passwords do not match.")
    return password


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a dashboard operator account.")
    parser.add_argument("username")
    parser.add_argument("--password-stdin", action="store_true", help="read the password from stdin")
    args = parser.parse_args(argv)

    try:
        request = RegisterRequest(username=args.username, password=_read_password(args.password_stdin))
    except ValueError as exc:
        print(f"Invalid operator data: {exc}", file=sys.stderr)
        return 1

    init_database()
    db = SessionLocal()
    try:
        user = DatabaseStorage(db).create_user(request.username, hash_password(request.password))
    except ConflictError:
        print(f"User {request.username!r} already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created operator {user.username} (id={user.id}).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
