"""Project cost model - one cost entry in one of the seven cost categories."""

import datetime as dt
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow

CostCategory = Literal[
    "material",
    "labor",
    "equipment",
    "subcontractor",
    "others",
    "cap_leases",
    "consumable",
]


class ProjectCost(Base):
    """ProjectCost ORM model.

    Labor rows carry hours, rates, per diem and mobilization; their ``cost``
    column caches the derived line total. Every other category stores ``cost``
    directly.
    """

    __tablename__ = "project_costs"

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
    # Null means the cost belongs to the base contract
    change_order_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("change_orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    vendor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    invoice_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    in_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Labor
    employee_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("employees.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    employee_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    st_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    st_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    ot_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    ot_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    dt_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    dt_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    per_diem: Mapped[float | None] = mapped_column(Float, nullable=True)
    mob_qty: Mapped[float | None] = mapped_column(Float, nullable=True)
    mob_rate: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Subcontractor / equipment
    subcontractor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=utcnow,
    )


# Pydantic schemas
class ProjectCostFields(BaseModel):
    """Editable cost fields shared by create and update."""

    change_order_id: UUID | None = None
    cost: float | None = Field(default=None, ge=0)
    vendor: str | None = None
    invoice_number: str | None = None
    in_system: bool | None = None
    employee_id: UUID | None = None
    st_hours: float | None = Field(default=None, ge=0)
    st_rate: float | None = Field(default=None, ge=0)
    ot_hours: float | None = Field(default=None, ge=0)
    ot_rate: float | None = Field(default=None, ge=0)
    dt_hours: float | None = Field(default=None, ge=0)
    dt_rate: float | None = Field(default=None, ge=0)
    per_diem: float | None = Field(default=None, ge=0)
    mob_qty: float | None = Field(default=None, ge=0)
    mob_rate: float | None = Field(default=None, ge=0)
    subcontractor_name: str | None = None
    description: str | None = None


class ProjectCostCreate(ProjectCostFields):
    """Schema for creating a cost entry. project_id comes from the path."""

    category: CostCategory
    date: dt.date


class ProjectCostUpdate(ProjectCostFields):
    """Schema for updating a cost entry. Only provided fields are changed."""

    date: dt.date | None = None


class ProjectCostResponse(BaseModel):
    """Schema for cost response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    project_id: UUID
    change_order_id: UUID | None = None
    category: str
    date: dt.date
    cost: float | None = None
    vendor: str | None = None
    invoice_number: str | None = None
    in_system: bool
    employee_id: UUID | None = None
    employee_name: str | None = None
    st_hours: float | None = None
    st_rate: float | None = None
    ot_hours: float | None = None
    ot_rate: float | None = None
    dt_hours: float | None = None
    dt_rate: float | None = None
    per_diem: float | None = None
    mob_qty: float | None = None
    mob_rate: float | None = None
    subcontractor_name: str | None = None
    description: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime | None = None


class CostTotalsResponse(BaseModel):
    """Per-category totals and counts for a project and change-order scope."""

    model_config = ConfigDict(from_attributes=True)

    totals: dict[str, float]
    counts: dict[str, int]
    grand_total: float
