"""Database models."""

from db import Base

# Import all models so Alembic can detect them
from models.tenant import Tenant
from models.user import User
from models.project import Project
from models.change_order import ChangeOrder
from models.employee import Employee
from models.project_cost import ProjectCost
from models.customer_invoice import CustomerInvoice
from models.project_budget import ProjectBudget
from models.user_invitation import UserInvitation
from models.attachment import Attachment

__all__ = [
    "Base",
    "Tenant",
    "User",
    "Project",
    "ChangeOrder",
    "Employee",
    "ProjectCost",
    "CustomerInvoice",
    "ProjectBudget",
    "UserInvitation",
    "Attachment",
]
