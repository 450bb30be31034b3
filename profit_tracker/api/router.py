"""Top-level API router."""

from fastapi import APIRouter

from profit_tracker.api.routes.assignment_plans import router as assignment_plans_router
from profit_tracker.api.routes.auth import router as auth_router
from profit_tracker.api.routes.clients import router as clients_router
from profit_tracker.api.routes.contracts import router as contracts_router
from profit_tracker.api.routes.dashboard import router as dashboard_router
from profit_tracker.api.routes.employees import router as employees_router
from profit_tracker.api.routes.expenses import router as expenses_router
from profit_tracker.api.routes.exports import router as exports_router
from profit_tracker.api.routes.health import router as health_router
from profit_tracker.api.routes.monthly_costs import router as monthly_costs_router
from profit_tracker.api.routes.partners import router as partners_router
from profit_tracker.api.routes.projects import router as projects_router
from profit_tracker.api.routes.reports import router as reports_router
from profit_tracker.api.routes.revenues import router as revenues_router
from profit_tracker.api.routes.work_records import router as work_records_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router)
api_router.include_router(clients_router)
api_router.include_router(employees_router)
api_router.include_router(partners_router)
api_router.include_router(projects_router)
api_router.include_router(contracts_router)
api_router.include_router(assignment_plans_router)
api_router.include_router(work_records_router)
api_router.include_router(monthly_costs_router)
api_router.include_router(expenses_router)
api_router.include_router(revenues_router)
api_router.include_router(reports_router)
api_router.include_router(dashboard_router)
api_router.include_router(exports_router)
