"""
Users module - Portal accounts and roles.
"""

from app.modules.users.models import STAFF_ROLES, User, UserRole
from app.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "STAFF_ROLES", "UserRepository"]
