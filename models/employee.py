"""Employee model - labor rate card, global to the tenant or scoped to a project."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import DateTime, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class Employee(Base):
    """Employee ORM model."""

    __tablename__ = "employees"

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
    # Null means the employee is usable on every project of the tenant
    project_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    standard_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    ot_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    dt_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    mob: Mapped[float | None] = mapped_column(Float, nullable=True)
    mob_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
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
class EmployeeBase(BaseModel):
    """Base employee schema."""

    name: str = Field(min_length=1, max_length=255)
    standard_rate: float = Field(ge=0)
    ot_rate: float = Field(ge=0)
    dt_rate: float = Field(ge=0)
    project_id: UUID | None = None
    mob: float | None = Field(default=None, ge=0)
    mob_rate: float | None = Field(default=None, ge=0)


class EmployeeCreate(EmployeeBase):
    """Schema for creating an employee."""


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee.

    ``project_id`` is applied whenever it is present in the request body, so an
    explicit null turns a project employee into a global one.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    standard_rate: float | None = Field(default=None, ge=0)
    ot_rate: float | None = Field(default=None, ge=0)
    dt_rate: float | None = Field(default=None, ge=0)
    project_id: UUID | None = None
    mob: float | None = Field(default=None, ge=0)
    mob_rate: float | None = Field(default=None, ge=0)


class EmployeeResponse(EmployeeBase):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    created_at: datetime
    updated_at: datetime | None = None
