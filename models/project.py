"""Project model - tenant-owned construction job."""

from datetime import datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import DateTime, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow
from models.project_budget import BudgetReportResponse
from models.project_cost import CostTotalsResponse

ProjectType = Literal["Field", "Shop", "Both"]
ProjectStatus = Literal["Active", "Inactive", "On Hold", "Completed", "Cancelled"]


class Project(Base):
    """Project ORM model - a job tracked for costs, change orders and billing."""

    __tablename__ = "projects"

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
    job_number: Mapped[str] = mapped_column(String(100), nullable=False)
    job_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer: Mapped[str] = mapped_column(String(255), nullable=False)
    project_type: Mapped[str] = mapped_column(String(20), nullable=False, default="Field")
    # Base contract only; change orders add to it
    total_contract_value: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Active", index=True)
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

    __table_args__ = (
        {"comment": "Projects are tenant-owned construction jobs"},
    )


# Pydantic schemas
class ProjectBase(BaseModel):
    """Base project schema."""

    job_number: str = Field(min_length=1, max_length=100)
    job_name: str = Field(min_length=1, max_length=255)
    customer: str = Field(min_length=1, max_length=255)
    project_type: ProjectType = "Field"
    total_contract_value: float = Field(default=0, ge=0)
    status: ProjectStatus = "Active"


class ProjectCreate(ProjectBase):
    """Schema for creating a project.

    Note: tenant_id is NOT included - it's set from the tenancy context server-side.
    """


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Only provided fields are changed."""

    job_number: str | None = Field(default=None, min_length=1, max_length=100)
    job_name: str | None = Field(default=None, min_length=1, max_length=255)
    customer: str | None = Field(default=None, min_length=1, max_length=255)
    project_type: ProjectType | None = None
    total_contract_value: float | None = Field(default=None, ge=0)
    status: ProjectStatus | None = None


class ProjectStatusUpdate(BaseModel):
    """Schema for the status-only update."""

    status: ProjectStatus


class ProjectResponse(ProjectBase):
    """Schema for project response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    created_at: datetime
    updated_at: datetime | None = None


class ProjectMetricsResponse(BaseModel):
    """Contract, cost, billing and profit figures for a project."""

    model_config = ConfigDict(from_attributes=True)

    base_contract_value: float
    change_order_value: float
    total_contract_value: float
    total_project_costs: float
    total_invoiced_amount: float
    amount_yet_to_bill: float
    gross_profit: float
    gross_profit_percentage: float


class ProjectSummaryResponse(BaseModel):
    """Dashboard view of one project for a change-order scope."""

    project: ProjectResponse
    change_order_scope: str
    metrics: ProjectMetricsResponse
    cost_totals: CostTotalsResponse
    budget: BudgetReportResponse
