#!/usr/bin/env python3
"""
Create an administrator account.

Account creation through the API always assigns the 'user' role, so this
script is the only way to obtain an admin. It writes through the same
repository and password hasher the service uses.

Usage:
    python scripts/create_admin.py --email ops@example.com --username ops \
        --fullname "Ops Team" --birthdate 1990-01-01
"""

from __future__ import annotations

import argparse
import getpass
import sys
import uuid
from datetime import date, datetime, timezone
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from adapter.mongodb.connection import get_mongodb_client  # noqa: E402
from adapter.mongodb.user_repository import MongoUserRepository  # noqa: E402
from domain.model.errors import DuplicateRecordError, StorageError, ValidationError  # noqa: E402
from domain.model.user import CreateUserInput, Role, UserRecord  # noqa: E402
from services.password_hasher import PasswordHasher  # noqa: E402
from utils.config import ConfigurationError, Settings  # noqa: E402
from utils.validate import validate_create_user_input  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--username", required=True)
    parser.add_argument("--fullname", required=True)
    parser.add_argument("--birthdate", required=True, type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    password = args.password or getpass.getpass("Password: ")

    data = CreateUserInput(
        fullname=args.fullname,
        username=args.username,
        email=args.email,
        birthdate=args.birthdate,
        password=password,
    )
    try:
        data = validate_create_user_input(data)
        settings = Settings.from_env()
    except (ValidationError, ConfigurationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        print("error: MongoDB unavailable", file=sys.stderr)
        return 1

    repo = MongoUserRepository(client[settings.mongodb_database])
    repo.ensure_indexes()

    now = datetime.now(timezone.utc)
    try:
        record = repo.insert(UserRecord(
            id=str(uuid.uuid4()),
            fullname=data.fullname,
            username=data.username,
            email=data.email,
            birthdate=data.birthdate,
            password_hash=PasswordHasher(settings.bcrypt_rounds).hash(password),
            role=Role.ADMIN.value,
            created_at=now,
            updated_at=now,
            # operator vouches for the address
            email_verified=True,
        ))
    except DuplicateRecordError:
        print(f"error: a user with email {data.email} already exists", file=sys.stderr)
        return 1
    except StorageError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Created admin {record.username} ({record.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
