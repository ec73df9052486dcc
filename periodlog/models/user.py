"""Account holders: teachers, principals, officials and other staff."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserRole(str, Enum):
    TEACHER = "TEACHER"
    PRINCIPAL = "PRINCIPAL"
    OFFICIAL = "OFFICIAL"
    OTHER = "OTHER"


class User(BaseModel):
    """Local profile row stored alongside the identity-provider account.

    ``role`` is fixed at registration; no operation changes it.
    """

    id: str
    name: str
    role: UserRole
    email: str
    avatar: Optional[str] = None  # data URL
    subjects: Optional[str] = None
    classes: Optional[str] = None
    bio: Optional[str] = None
    experience: Optional[int] = None


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    role: UserRole
    avatar: Optional[str] = None
    subjects: Optional[str] = None
    classes: Optional[str] = None
    bio: Optional[str] = None
    experience: Optional[int] = Field(default=None, ge=0)


class UserProfileUpdate(BaseModel):
    """Profile-edit payload. Role and email are deliberately absent."""

    name: Optional[str] = Field(default=None, min_length=1)
    avatar: Optional[str] = None
    subjects: Optional[str] = None
    classes: Optional[str] = None
    bio: Optional[str] = None
    experience: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v):
        # Omit the field to keep the current name; null would blank it
        if v is None or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()
