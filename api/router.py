"""Main API router that includes versioned routers."""

from fastapi import APIRouter

from api.v1 import (
    attachments,
    auth,
    budgets,
    change_orders,
    costs,
    employees,
    health,
    invitations,
    invoices,
    projects,
    tenants,
    users,
)

# Main API router
api_router = APIRouter()

# Include v1 routers
v1_router = APIRouter(prefix="/v1")
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(auth.router, tags=["auth"])
v1_router.include_router(tenants.router, tags=["tenants"])
v1_router.include_router(users.router, tags=["users"])
v1_router.include_router(invitations.router, tags=["invitations"])
v1_router.include_router(projects.router, tags=["projects"])
v1_router.include_router(change_orders.router, tags=["change-orders"])
v1_router.include_router(costs.router, tags=["costs"])
v1_router.include_router(employees.router, tags=["employees"])
v1_router.include_router(invoices.router, tags=["invoices"])
v1_router.include_router(budgets.router, tags=["budgets"])
v1_router.include_router(attachments.router, tags=["attachments"])

api_router.include_router(v1_router)
