"""Tenant model and schema."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow
from models.user import UserResponse

SUBDOMAIN_PATTERN = r"^[a-zA-Z0-9][a-zA-Z0-9-]{1,48}[a-zA-Z0-9]$"


class Tenant(Base):
    """Tenant ORM model - an isolated organization account."""

    __tablename__ = "tenants"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    plan: Mapped[str] = mapped_column(String(50), nullable=False, default="trial")
    subscription_ends_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
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
class TenantBase(BaseModel):
    """Base tenant schema."""

    name: str = Field(min_length=1, max_length=255)
    subdomain: str = Field(pattern=SUBDOMAIN_PATTERN)
    email: EmailStr
    phone: str | None = None


class TenantCreate(TenantBase):
    """Schema for the tenant setup form."""

    pass


class TenantResponse(TenantBase):
    """Schema for tenant response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: str
    plan: str
    subscription_ends_at: datetime | None = None
    created_at: datetime


class TenantSetupResponse(BaseModel):
    """A newly created tenant and a token that carries it."""

    tenant: TenantResponse
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
