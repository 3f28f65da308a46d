"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.auth import (
    AuthResponse,
    CompleteSetupRequest,
    LoginRequest,
    RegisterOwnerRequest,
    SetActiveOrganizationRequest,
)
from app.schemas.organization import MyOrganizationResponse, OrganizationRead, OrganizationUpdate
from app.schemas.membership import (
    MemberRead,
    MemberRemovedResponse,
    MembershipRead,
    ProvisionRequest,
    ProvisionResponse,
    RoleChangeRequest,
)
from app.schemas.task import TaskCreate, TaskRead, TaskUpdate
from app.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseSummary
from app.schemas.health import HealthRead

__all__ = [
    "AuthResponse",
    "CompleteSetupRequest",
    "LoginRequest",
    "RegisterOwnerRequest",
    "SetActiveOrganizationRequest",
    "MyOrganizationResponse",
    "OrganizationRead",
    "OrganizationUpdate",
    "MemberRead",
    "MemberRemovedResponse",
    "MembershipRead",
    "ProvisionRequest",
    "ProvisionResponse",
    "RoleChangeRequest",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "ExpenseCreate",
    "ExpenseRead",
    "ExpenseSummary",
    "HealthRead",
]
