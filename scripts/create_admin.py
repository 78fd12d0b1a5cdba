#!/usr/bin/env python3
"""
Admin Account Script

Admin accounts cannot be created through signup. Run this once per admin.
Usage: python scripts/create_admin.py admin@example.com <password>
"""
import argparse

from internhub.core.config import get_settings
from internhub.core.errors import DuplicateAccount
from internhub.core.logging import setup_logging
from internhub.db.session import init_schema, test_database_connection
from internhub.schemas.schemas import UserRole
from internhub.services.account_service import create_account


def main():
    parser = argparse.ArgumentParser(description="Create an InternHub admin account")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args()

    setup_logging()
    settings = get_settings()
    print("=" * 50)
    print("INTERNHUB - CREATE ADMIN")
    print("=" * 50)
    print(f"    Database: {settings.database_url.split('@')[-1]}")

    if not test_database_connection():
        print("    ❌ Database: FAILED")
        raise SystemExit(1)

    init_schema()
    try:
        account_id = create_account(args.email, args.password, UserRole.admin)
    except DuplicateAccount:
        print(f"    ⚠️  {args.email} is already registered")
        raise SystemExit(1)

    print(f"    ✅ Admin created: {account_id}")


if __name__ == "__main__":
    main()
