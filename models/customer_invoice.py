"""Customer invoice model - an amount billed to the project customer."""

from datetime import date, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class CustomerInvoice(Base):
    """CustomerInvoice ORM model."""

    __tablename__ = "customer_invoices"

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
    change_order_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("change_orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    invoice_number: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    date_billed: Mapped[date] = mapped_column(Date, nullable=False)
    in_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
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
class CustomerInvoiceBase(BaseModel):
    """Base invoice schema."""

    invoice_number: str = Field(min_length=1, max_length=100)
    amount: float = Field(gt=0)
    date_billed: date
    change_order_id: UUID | None = None
    in_system: bool = False


class CustomerInvoiceCreate(CustomerInvoiceBase):
    """Schema for creating an invoice. project_id comes from the path."""


class CustomerInvoiceUpdate(BaseModel):
    """Schema for updating an invoice."""

    invoice_number: str | None = Field(default=None, min_length=1, max_length=100)
    amount: float | None = Field(default=None, gt=0)
    date_billed: date | None = None
    change_order_id: UUID | None = None
    in_system: bool | None = None


class CustomerInvoiceResponse(CustomerInvoiceBase):
    """Schema for invoice response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    project_id: UUID
    created_at: datetime
    updated_at: datetime | None = None
