"""
Pydantic models for user accounts and authentication.

``UserAccount`` is the stored record and holds the password hash;
``UserRead`` is the public view returned through the API, so the hash
never leaves the service layer.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from .common import ApiModel, normalize_email


class UserRole(str, Enum):
    COACH = "coach"
    ADMIN = "admin"


class UserAccount(ApiModel):
    id: str
    email: str
    password_hash: str
    role: UserRole
    name: str
    avatar: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None
    is_active: bool = True
    profile: Dict[str, Any] = Field(default_factory=dict)


class UserRead(ApiModel):
    """Schema for reading a user from the API."""

    id: str
    email: str
    role: UserRole
    name: str
    avatar: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None
    profile: Dict[str, Any] = Field(default_factory=dict)


class LoginRequest(ApiModel):
    email: str = Field(..., examples=["coach@fitcoachpro.com"])
    password: str = Field(..., min_length=6, examples=["coach123"])

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return normalize_email(value)


class RegisterRequest(LoginRequest):
    """Schema for registering a user.

    Registering with the ``coach`` role also creates an empty coach
    profile owned by the new account.
    """

    name: str = Field(..., min_length=2, examples=["Jane Coach"])
    role: UserRole = Field(UserRole.COACH, examples=["coach"])
    profile: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value


class ProfileUpdate(ApiModel):
    name: str | None = Field(None, min_length=2)
    profile: Dict[str, Any] | None = None


class TokenResponse(ApiModel):
    success: bool = True
    message: str
    token: str
    expires_in: int
    user: UserRead
