"""
User Schemas

Public representation of a user account. The password hash never leaves
the service.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from app.modules.users.models import UserRole


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    full_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
