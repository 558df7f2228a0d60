#!/usr/bin/env python3
"""
Initialize database and the first admin account.

Usage: python scripts/init_db.py [--username admin] [--password ...] [--reset-password]

Without --password the ADMIN_PASSWORD setting is used, or a random
password is generated and printed once.
"""

import argparse
import asyncio
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from comet_admin.database import async_session_maker, init_db, close_db
from comet_admin.models import AdminRole
from comet_admin.services.bootstrap import ensure_admin
from comet_admin.utils.security import generate_password, verify_password
from comet_admin.config import settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialize the Comet admin database")
    parser.add_argument("--username", default=settings.admin_username)
    parser.add_argument("--password", default=None)
    parser.add_argument("--email", default=None)
    parser.add_argument(
        "--role",
        choices=[role.value for role in AdminRole],
        default=AdminRole.SUPERADMIN.value
    )
    parser.add_argument(
        "--reset-password",
        action="store_true",
        help="Overwrite the password if the account already exists"
    )
    return parser.parse_args(argv)


async def main(argv=None):
    """Initialize database."""
    args = parse_args(argv)
    password = args.password or settings.admin_password or generate_password()

    print("Initializing Comet admin database...")

    # Create tables
    await init_db()
    print("Database tables created")

    async with async_session_maker() as db:
        admin, created = await ensure_admin(
            db,
            username=args.username,
            password=password,
            role=AdminRole(args.role),
            email=args.email,
            reset_password=args.reset_password
        )

        if created:
            print(f"Created admin user: {admin.username} ({admin.role.value})")
        elif args.reset_password:
            print(f"Password reset for admin user: {admin.username}")
        else:
            print(f"Admin user '{admin.username}' already exists")

        changed = created or args.reset_password
        if changed:
            await db.refresh(admin)
            matches = verify_password(password, admin.password_hash)
            print(f"Password verification: {'SUCCESS' if matches else 'FAILED'}")

    await close_db()

    if not changed:
        return

    print(f"\nAdmin credentials:")
    print(f"  Username: {admin.username}")
    print(f"  Password: {password}")
    print("\nIMPORTANT: Change the admin password after first login!")


if __name__ == "__main__":
    asyncio.run(main())
