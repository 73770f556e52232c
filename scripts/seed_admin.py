"""
Seed Super Admin User

Creates the initial super admin account for the back-office.
Run this script once after the migrations.

Usage:
    SEED_ADMIN_EMAIL=admin@sekolah.sch.id SEED_ADMIN_PASSWORD=... \
        python scripts/seed_admin.py

Optional: SEED_ADMIN_NAME (defaults to "Super Admin").
"""

import asyncio
import os
import sys

from school_portal.core.database import async_session_maker, close_db
from school_portal.core.security import hash_password
from school_portal.modules.admin_users.models import AdminRole
from school_portal.modules.admin_users.repository import AdminUserRepository


async def seed_admin() -> int:
    """Create the super admin if it doesn't exist. Returns the process exit code."""
    email = os.environ.get("SEED_ADMIN_EMAIL", "").strip().lower()
    password = os.environ.get("SEED_ADMIN_PASSWORD", "")
    full_name = os.environ.get("SEED_ADMIN_NAME", "Super Admin").strip()

    if not email or len(password) < 8:
        print("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD (min. 8 characters) are required.")
        return 1

    try:
        return await _create_super_admin(email, password, full_name)
    finally:
        await close_db()


async def _create_super_admin(email: str, password: str, full_name: str) -> int:
    async with async_session_maker() as db:
        existing = await AdminUserRepository.get_by_email(db, email)
        if existing:
            print(f"Admin already exists: {email}")
            print(f"  ID: {existing.id}")
            print(f"  Role: {existing.role.value}")
            return 0

        admin = await AdminUserRepository.create(
            db,
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            role=AdminRole.SUPER_ADMIN,
        )

        print("Super admin created successfully!")
        print(f"  Email: {admin.email}")
        print(f"  Name: {admin.full_name}")
        print(f"  ID: {admin.id}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(seed_admin()))
