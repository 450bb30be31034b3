"""ORM model package."""

from profit_tracker.models.entities import (
    AllocationType,
    AssignmentPlan,
    Client,
    Contract,
    ContractStatus,
    ContractUnit,
    Employee,
    EmployeeCostHistory,
    ExpenseRecord,
    MonthlyActualCost,
    Partner,
    Project,
    ProjectStatus,
    ResourceType,
    RevenueRecord,
    ServiceType,
    User,
    UserRole,
    WorkRecord,
)
from profit_tracker.models.views import project_profit_standard

__all__ = [
    "AllocationType",
    "AssignmentPlan",
    "Client",
    "Contract",
    "ContractStatus",
    "ContractUnit",
    "Employee",
    "EmployeeCostHistory",
    "ExpenseRecord",
    "MonthlyActualCost",
    "Partner",
    "Project",
    "ProjectStatus",
    "ResourceType",
    "RevenueRecord",
    "ServiceType",
    "User",
    "UserRole",
    "WorkRecord",
    "project_profit_standard",
]
