#!/usr/bin/env python3
"""Create a user account. Usage: python -m scripts.create_user <username> --password <pw> [--admin]"""
import argparse
import sys
from pathlib import Path

# Ensure project root on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.database import SessionLocal, init_db
from app.errors import ConflictError
from app.schemas.user import UserCreate
from app.services.auth import hash_password
from app.storage import DatabaseStorage


def main():
    parser = argparse.ArgumentParser(description="Create a user")
    parser.add_argument("username")
    parser.add_argument("--password", required=True)
    parser.add_argument("--admin", action="store_true")
    args = parser.parse_args()

    init_db()
    db = SessionLocal()
    try:
        storage = DatabaseStorage(db)
        storage.create_user(
            UserCreate(
                username=args.username,
                password_hash=hash_password(args.password),
                is_admin=args.admin,
            )
        )
    except ConflictError:
        print(f"User '{args.username}' already exists.")
        return
    finally:
        db.close()
    print(f"Created {'admin' if args.admin else 'regular'} user: {args.username}")


if __name__ == "__main__":
    main()
