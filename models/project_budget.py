"""Project budget model - per-category budget ceilings, one row per project."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import DateTime, Float, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


def budget_column(category: str) -> str:
    """Name of the budget column for a cost category."""
    return f"{category}_budget"


class ProjectBudget(Base):
    """ProjectBudget ORM model."""

    __tablename__ = "project_budgets"

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
    material_budget: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    labor_budget: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    equipment_budget: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    subcontractor_budget: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    others_budget: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    cap_leases_budget: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    consumable_budget: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    updated_by: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
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

    __table_args__ = (
        UniqueConstraint("tenant_id", "project_id", name="uq_project_budgets_tenant_project"),
    )


# Pydantic schemas
class ProjectBudgetBase(BaseModel):
    """Per-category budget ceilings."""

    material_budget: float = Field(default=0, ge=0)
    labor_budget: float = Field(default=0, ge=0)
    equipment_budget: float = Field(default=0, ge=0)
    subcontractor_budget: float = Field(default=0, ge=0)
    others_budget: float = Field(default=0, ge=0)
    cap_leases_budget: float = Field(default=0, ge=0)
    consumable_budget: float = Field(default=0, ge=0)


class ProjectBudgetUpdate(ProjectBudgetBase):
    """Schema for saving every ceiling at once."""


class CategoryBudgetUpdate(BaseModel):
    """Schema for saving a single category ceiling."""

    amount: float = Field(ge=0)


class ProjectBudgetResponse(ProjectBudgetBase):
    """Schema for budget response. ``id`` is null for an unsaved default budget."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    tenant_id: UUID
    project_id: UUID
    updated_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    total_budget: float = 0


class BudgetLineResponse(BaseModel):
    """Budget versus actual for one category."""

    category: str
    budget: float
    actual: float
    variance: float
    percent_used: float
    status: str
    color: str


class BudgetReportResponse(BaseModel):
    """Budget versus actual for every category plus the project total."""

    lines: list[BudgetLineResponse]
    total: BudgetLineResponse
