"""Read-only mappings of database-owned reporting views."""

from sqlalchemy import Column, Integer, MetaData, Numeric, String, Table

from profit_tracker.db.views import PROJECT_PROFIT_STANDARD_VIEW

# Kept off ``Base.metadata`` so ``create_all`` never builds the view as a table.
view_metadata = MetaData()

project_profit_standard = Table(
    PROJECT_PROFIT_STANDARD_VIEW,
    view_metadata,
    Column("project_id", Integer, primary_key=True),
    Column("project_code", String(32)),
    Column("project_name", String(255)),
    Column("client_id", Integer),
    Column("client_name", String(255)),
    Column("pm_employee_id", Integer),
    Column("pm_name", String(255)),
    Column("service_type", String(32)),
    Column("status", String(32)),
    Column("contract_amount", Numeric(14, 2)),
    Column("revenue", Numeric(14, 2)),
    Column("cost_labor_standard", Numeric(14, 2)),
    Column("cost_partner", Numeric(14, 2)),
    Column("cost_other", Numeric(14, 2)),
    Column("profit_standard", Numeric(14, 2)),
)
