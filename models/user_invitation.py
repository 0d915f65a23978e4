"""User invitation model - a pending offer to join a tenant."""

from datetime import datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from sqlalchemy import JSON, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, as_utc, utcnow
from models.user import PermissionLevel, Role, validate_permission_map

# "expired" is never stored; it is derived from expires_at when read
InvitationStatus = Literal["pending", "accepted", "cancelled"]


class UserInvitation(Base):
    """UserInvitation ORM model.

    Role and permissions are a snapshot taken when the invitation is issued
    and are copied onto the account when it is accepted.
    """

    __tablename__ = "user_invitations"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    tenant_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="entry")
    permissions: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    invited_by: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    invitation_token: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
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

    def is_expired(self, now: datetime | None = None) -> bool:
        """An invitation is expired from the instant ``expires_at`` is reached."""
        now = now or utcnow()
        return as_utc(now) >= as_utc(self.expires_at)


# Pydantic schemas
class UserInvitationCreate(BaseModel):
    """Schema for inviting a user into the current tenant."""

    email: EmailStr
    role: Role = "entry"
    permissions: dict[str, PermissionLevel] = {}

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("permissions")
    @classmethod
    def _known_areas(cls, value: dict[str, str]) -> dict[str, str]:
        return validate_permission_map(value)


class UserInvitationResponse(BaseModel):
    """Schema for invitation response as seen by tenant admins."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    email: str
    role: str
    permissions: dict[str, str]
    invited_by: UUID | None = None
    status: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime | None = None


class InvitationLookupResponse(BaseModel):
    """What an invitee sees before accepting."""

    id: UUID
    email: str
    role: str
    tenant_id: UUID
    tenant_name: str
    inviter_name: str | None = None
    expires_at: datetime


class CreateInvitedUserRequest(BaseModel):
    """Schema for creating a brand new account from an invitation."""

    invitation_token: str = Field(min_length=1)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=255)


class JoinTenantRequest(BaseModel):
    """Schema for attaching an existing account to the inviting tenant."""

    invitation_token: str = Field(min_length=1)


class AcceptInvitationRequest(BaseModel):
    """Schema for marking an invitation accepted by id."""

    invitation_id: UUID
