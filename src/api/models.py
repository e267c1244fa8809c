"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from domain.model.user import Role, User


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    id: str = Field(..., description="User ID")
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )


class SignupRequest(BaseModel):
    """Request model for user signup."""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Response model for signup/login."""
    token: str
    user: UserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse]
    skip: int
    limit: int
