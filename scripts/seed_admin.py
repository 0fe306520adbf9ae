"""
Seed Admin User

Creates the first ADMIN account. Run once after migrations; further staff
accounts are created through POST /api/v1/admin/users.

Usage:
    SEED_ADMIN_EMAIL=... SEED_ADMIN_PASSWORD=... python scripts/seed_admin.py
"""

import asyncio
import os

from app.core.database import async_session_maker, close_db
from app.core.security import hash_password
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository


async def seed_admin() -> None:
    """Create the admin user if it doesn't exist."""
    email = os.environ["SEED_ADMIN_EMAIL"]
    password = os.environ["SEED_ADMIN_PASSWORD"]
    full_name = os.environ.get("SEED_ADMIN_NAME", "Portal Administrator")

    async with async_session_maker() as db:
        existing_user = await UserRepository.get_by_email(db, email)

        if existing_user:
            print(f"Admin already exists: {email}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            return

        admin_user = await UserRepository.create(
            db,
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            role=UserRole.ADMIN,
        )
        await db.commit()

        print("Admin created successfully!")
        print(f"  Email: {email}")
        print(f"  Name: {full_name}")
        print(f"  ID: {admin_user.id}")

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_admin())
