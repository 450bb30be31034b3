"""DDL for database-owned reporting views.

The aggregation lives in the database; application code only selects from
these views. The SQL sticks to constructs shared by PostgreSQL and SQLite.
"""

from sqlalchemy import text
from sqlalchemy.engine import Connection

PROJECT_PROFIT_STANDARD_VIEW = "v_project_profit_standard"

# Partner rates are normalized to hourly: 8h per day, 160h per month.
PROJECT_PROFIT_STANDARD_SQL = f"""
CREATE VIEW {PROJECT_PROFIT_STANDARD_VIEW} AS
SELECT
    p.project_id,
    p.project_code,
    p.name AS project_name,
    p.client_id,
    c.name AS client_name,
    p.pm_employee_id,
    e.name AS pm_name,
    p.service_type,
    p.status,
    p.contract_amount,
    COALESCE(rev.revenue, 0) AS revenue,
    COALESCE(lab.cost_labor_standard, 0) AS cost_labor_standard,
    COALESCE(prt.cost_partner, 0) AS cost_partner,
    COALESCE(oth.cost_other, 0) AS cost_other,
    COALESCE(rev.revenue, 0)
        - COALESCE(lab.cost_labor_standard, 0)
        - COALESCE(prt.cost_partner, 0)
        - COALESCE(oth.cost_other, 0) AS profit_standard
FROM projects p
JOIN clients c ON c.client_id = p.client_id
JOIN employees e ON e.employee_id = p.pm_employee_id
LEFT JOIN (
    SELECT project_id, SUM(amount) AS revenue
    FROM revenue_records
    GROUP BY project_id
) rev ON rev.project_id = p.project_id
LEFT JOIN (
    SELECT w.project_id, SUM(w.hours * COALESCE(we.standard_unit_cost, 0)) AS cost_labor_standard
    FROM work_records w
    JOIN employees we ON we.employee_id = w.employee_id
    WHERE w.resource_type = 'employee' AND w.deleted_at IS NULL
    GROUP BY w.project_id
) lab ON lab.project_id = p.project_id
LEFT JOIN (
    SELECT
        w.project_id,
        SUM(
            w.hours * CASE wp.contract_unit
                WHEN '時給' THEN wp.contract_unit_price
                WHEN '日額' THEN wp.contract_unit_price / 8.0
                ELSE wp.contract_unit_price / 160.0
            END
        ) AS cost_partner
    FROM work_records w
    JOIN partners wp ON wp.partner_id = w.partner_id
    WHERE w.resource_type = 'partner' AND w.deleted_at IS NULL
    GROUP BY w.project_id
) prt ON prt.project_id = p.project_id
LEFT JOIN (
    SELECT project_id, SUM(amount) AS cost_other
    FROM expense_records
    WHERE deleted_at IS NULL
    GROUP BY project_id
) oth ON oth.project_id = p.project_id
WHERE p.deleted_at IS NULL
"""


def create_reporting_views(connection: Connection) -> None:
    connection.execute(text(PROJECT_PROFIT_STANDARD_SQL))


def drop_reporting_views(connection: Connection) -> None:
    connection.execute(text(f"DROP VIEW IF EXISTS {PROJECT_PROFIT_STANDARD_VIEW}"))
