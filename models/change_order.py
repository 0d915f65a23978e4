"""Change order model - contract amendment adding value to a project."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class ChangeOrder(Base):
    """ChangeOrder ORM model."""

    __tablename__ = "change_orders"

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
    project_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_contract_value: Mapped[float | None] = mapped_column(Float, nullable=True, default=0)
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
class ChangeOrderBase(BaseModel):
    """Base change order schema."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    additional_contract_value: float = Field(default=0, ge=0)


class ChangeOrderCreate(ChangeOrderBase):
    """Schema for creating a change order. project_id comes from the path."""


class ChangeOrderUpdate(BaseModel):
    """Schema for updating a change order."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    additional_contract_value: float | None = Field(default=None, ge=0)


class ChangeOrderResponse(BaseModel):
    """Schema for change order response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    project_id: UUID
    name: str
    description: str | None = None
    additional_contract_value: float | None = None
    created_at: datetime
    updated_at: datetime | None = None


class ChangeOrderSummary(BaseModel):
    """Aggregate figures for a project's change orders."""

    count: int
    total_additional_value: float
    average_value: float
