"""
User Repository

Database operations for user management.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        role: UserRole = UserRole.APPLICANT,
        is_active: bool = True,
    ) -> User:
        """
        Create a new user record.

        The row is flushed, not committed; the caller owns the transaction.

        Args:
            db: Database session
            email: User's email address (unique)
            password_hash: Hashed password
            full_name: Display name
            role: User's role
            is_active: Whether the account can log in

        Returns:
            Created User instance
        """
        user = User(
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            is_active=is_active,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        """Get a user by ID."""
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email address (case-insensitive)."""
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def list_by_roles(db: AsyncSession, roles: Iterable[UserRole]) -> list[User]:
        """List users holding any of the given roles, newest first."""
        result = await db.execute(
            select(User)
            .where(User.role.in_(list(roles)))
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_all_ids(db: AsyncSession) -> list[int]:
        """Return the IDs of every user."""
        result = await db.execute(select(User.id).order_by(User.id))
        return list(result.scalars().all())

    @staticmethod
    async def count_existing(db: AsyncSession, user_ids: Iterable[int]) -> int:
        """Count how many of the given user IDs exist."""
        ids = set(user_ids)
        if not ids:
            return 0
        result = await db.execute(select(func.count()).select_from(User).where(User.id.in_(ids)))
        return result.scalar_one()
