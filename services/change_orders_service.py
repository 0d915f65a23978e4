"""Service layer for ChangeOrder business logic."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.change_order import ChangeOrder, ChangeOrderCreate, ChangeOrderSummary, ChangeOrderUpdate
from repos import change_orders_repo, projects_repo
from services.cost_aggregator import SCOPE_ALL, SCOPE_BASE
from services.financial_metrics import change_order_summary

logger = logging.getLogger(__name__)


async def _ensure_project(session: AsyncSession, membership_ctx: TenancyContext, project_id: UUID) -> None:
    project = await projects_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )


async def get_change_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order_id: UUID,
) -> ChangeOrder:
    change_order = await change_orders_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        change_order_id=change_order_id,
    )
    if not change_order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Change order not found",
        )
    return change_order


async def ensure_belongs_to_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order_id: UUID | None,
) -> None:
    """
    Reject a change order reference that is not part of the project.

    Raises:
        HTTPException: 400 if the change order is unknown for this project
    """
    if change_order_id is None:
        return
    change_order = await change_orders_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        change_order_id=change_order_id,
    )
    if not change_order:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Change order does not belong to this project",
        )


async def resolve_scope(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order: str | None,
) -> str | UUID | None:
    """
    Parse a ``change_order`` query value into an aggregation scope.

    Returns:
        None for all rows, ``"base"`` for base contract rows, or the id of
        one of the project's change orders

    Raises:
        HTTPException: 400 for a malformed value, 404 for an unknown change order
    """
    if change_order is None or change_order == "" or change_order == SCOPE_ALL:
        return None
    if change_order == SCOPE_BASE:
        return SCOPE_BASE

    try:
        change_order_id = UUID(change_order)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="change_order must be 'all', 'base' or a change order id",
        )

    await get_change_order(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order_id=change_order_id,
    )
    return change_order_id


async def list_change_orders(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
) -> list[ChangeOrder]:
    await _ensure_project(session, membership_ctx, project_id)
    return await change_orders_repo.list_by_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )


async def summarize_change_orders(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
) -> ChangeOrderSummary:
    change_orders = await list_change_orders(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
    )
    return ChangeOrderSummary.model_validate(change_order_summary(change_orders), from_attributes=True)


async def create_change_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    payload: ChangeOrderCreate,
) -> ChangeOrder:
    """
    Add a change order to a project.

    Raises:
        HTTPException: 404 if the project is not in the tenant
    """
    await _ensure_project(session, membership_ctx, project_id)

    change_order = ChangeOrder(
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        name=payload.name,
        description=payload.description,
        additional_contract_value=payload.additional_contract_value,
    )
    change_order = await change_orders_repo.create(session, change_order)
    await session.commit()
    await session.refresh(change_order)
    return change_order


async def update_change_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order_id: UUID,
    payload: ChangeOrderUpdate,
) -> ChangeOrder:
    change_order = await get_change_order(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order_id=change_order_id,
    )

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("name") is not None:
        change_order.name = updates["name"]
    if "description" in updates:
        change_order.description = updates["description"]
    if updates.get("additional_contract_value") is not None:
        change_order.additional_contract_value = updates["additional_contract_value"]

    await session.commit()
    await session.refresh(change_order)
    return change_order


async def delete_change_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order_id: UUID,
) -> None:
    """
    Delete a change order.

    Costs and invoices booked against it are moved to the base contract in
    the same transaction.
    """
    change_order = await get_change_order(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order_id=change_order_id,
    )

    await change_orders_repo.detach_references(
        session,
        tenant_id=membership_ctx.tenant_id,
        change_order_id=change_order.id,
    )
    await change_orders_repo.delete(session, change_order)
    await session.commit()
    logger.info("Change order %s deleted from project %s", change_order_id, project_id)
