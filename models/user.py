"""User model and schema."""

from datetime import datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow
from services.permissions import PERMISSION_AREAS

Role = Literal["master", "entry", "view"]
PermissionLevel = Literal["none", "read", "write"]


def validate_permission_map(value: dict[str, str]) -> dict[str, str]:
    """Reject unknown functional areas in a permissions map."""
    unknown = set(value) - set(PERMISSION_AREAS)
    if unknown:
        raise ValueError(f"Unknown permission areas: {', '.join(sorted(unknown))}")
    return value


class User(Base):
    """User ORM model - an account, attached to at most one tenant."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    # Null until the account creates or joins an organization
    tenant_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="entry")
    permissions: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=utcnow,
    )


# Pydantic schemas
class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    name: str
    role: Role = "entry"
    permissions: dict[str, PermissionLevel] = {}
    is_active: bool = True

    @field_validator("permissions")
    @classmethod
    def _known_areas(cls, value: dict[str, str]) -> dict[str, str]:
        return validate_permission_map(value)


class UserUpdate(BaseModel):
    """Schema for an admin editing another user. Only provided fields change."""

    role: Role | None = None
    permissions: dict[str, PermissionLevel] | None = None
    is_active: bool | None = None

    @field_validator("permissions")
    @classmethod
    def _known_areas(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        if value is None:
            return value
        return validate_permission_map(value)


class UserResponse(UserBase):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID | None = None
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None
