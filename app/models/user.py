from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
from enum import Enum

# ──────────────────────────────────────────────────────────────────────────────
# Enums
# ──────────────────────────────────────────────────────────────────────────────

class UserRole(str, Enum):
    ADMIN = "admin"
    MAINTENANCE = "maintenance"
    CREATOR = "creator"
    UPDATER = "updater"
    VIEWER = "viewer"
    SPECIAL_EDITOR_PRIORITY = "special_editor_priority"
    SPECIAL_EDITOR_PHOTOS = "special_editor_photos"

    @classmethod
    def from_value(cls, value: Any) -> "UserRole":
        """Resolve a stored role string; anything unknown or missing is a viewer."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.VIEWER


# ──────────────────────────────────────────────────────────────────────────────
# Profiles and actors
# ──────────────────────────────────────────────────────────────────────────────

class UserProfile(BaseModel):
    """Document stored at users/{uid}."""
    id: Optional[str] = None  # Firebase UID
    email: Optional[str] = None
    displayName: Optional[str] = None
    role: UserRole = Field(default=UserRole.VIEWER)

    @field_validator("role", mode="before")
    @classmethod
    def known_role(cls, v):
        return UserRole.from_value(v)


class Actor(BaseModel):
    """The authenticated identity performing an operation."""
    uid: Optional[str] = None  # Firebase UID, absent for actors built from email + role
    email: Optional[str] = None
    role: UserRole = UserRole.VIEWER

    @field_validator("role", mode="before")
    @classmethod
    def known_role(cls, v):
        return UserRole.from_value(v)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v
