#!/usr/bin/env python3
"""
Create an admin account, or set a new password for an existing one.

Setting a password this way bumps the admin's token version and removes
every session, same as a password reset through the API.

Usage:
    python scripts/create_admin.py admin@example.com --name "Site Owner"
    python scripts/create_admin.py admin@example.com --reset

The password is read interactively. Connection settings (MONGODB_URI,
MONGODB_DATABASE, BCRYPT_ROUNDS, ...) come from the environment or .env.
"""

import argparse
import asyncio
import getpass
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.auth import PasswordHasher
from common.database import MongoDB, MongoStore
from common.utils import validate_password
from portfolio.auth.models import AdminUpdate
from portfolio.auth.services import AdminService, DeviceDetector, GeoIPService, SessionManager
from portfolio.config import settings


def read_password() -> str:
    password = getpass.getpass("New password: ")
    if password != getpass.getpass("Repeat password: "):
        print("ERROR: Passwords do not match")
        sys.exit(1)

    is_valid, errors = validate_password(password, min_length=settings.PASSWORD_MIN_LENGTH)
    if not is_valid:
        for error in errors:
            print(f"ERROR: {error}")
        sys.exit(1)

    return password


async def run(email: str, name: str, reset: bool) -> None:
    db = MongoDB()
    await db.connect(uri=settings.MONGODB_URI, database_name=settings.MONGODB_DATABASE)

    try:
        store = MongoStore(db.db)
        admin_service = AdminService(store)
        await admin_service.ensure_indexes()
        hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

        admin = await admin_service.get_by_email(email)

        if admin and not reset:
            print(f"Admin {email} already exists (id {admin['id']}). Use --reset to change its password.")
            sys.exit(1)
        if not admin and reset:
            print(f"ERROR: No admin with email {email}")
            sys.exit(1)

        password_hash = hasher.hash_password(read_password())

        if admin:
            await admin_service.update(
                admin["id"],
                AdminUpdate(
                    passwordHash=password_hash,
                    loginAttempts=0,
                    lockUntil=None,
                    tokenVersion=admin.get("tokenVersion", 0) + 1
                )
            )
            sessions = SessionManager(store, DeviceDetector(), GeoIPService())
            revoked = await sessions.revoke_all_sessions(admin["id"])
            print(f"Password updated for {email}; {revoked} session(s) signed out")
        else:
            admin = await admin_service.create(email=email, password_hash=password_hash, name=name)
            print(f"Admin created: {admin['email']} (id {admin['id']})")
    finally:
        await db.disconnect()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or reset a portfolio admin account")
    parser.add_argument("email")
    parser.add_argument("--name", default="Admin", help="Display name for a new admin")
    parser.add_argument("--reset", action="store_true", help="Set a new password for an existing admin")
    args = parser.parse_args()

    asyncio.run(run(args.email, args.name, args.reset))


if __name__ == "__main__":
    main()
