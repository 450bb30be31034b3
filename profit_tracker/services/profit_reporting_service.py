"""Profit reports, dashboard aggregates and report exports."""

from __future__ import annotations

import csv
import io
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from fastapi import status
from sqlalchemy.orm import Session

from profit_tracker.core.errors import AppError, not_found
from profit_tracker.core.responses import decimal_str
from profit_tracker.repositories.profit_repository import ProfitRepository

PM_RANKING_LIMIT = 10

PROJECT_PROFIT_COLUMNS = (
    "project_id",
    "project_code",
    "project_name",
    "client_id",
    "client_name",
    "pm_employee_id",
    "pm_name",
    "service_type",
    "status",
    "contract_amount",
    "revenue",
    "cost_labor_standard",
    "cost_partner",
    "cost_other",
    "profit_standard",
)
PM_RANKING_COLUMNS = ("pm_employee_id", "pm_name", "total_profit")
ALERT_COLUMNS = ("project_id", "project_code", "project_name", "profit_standard")

EXPORT_FORMATS = {"csv", "xlsx"}


@dataclass(slots=True)
class ExportFilePayload:
    media_type: str
    filename: str
    content: bytes


def _serialize_row(row: Mapping[str, object], columns: tuple[str, ...]) -> dict[str, object]:
    payload: dict[str, object] = {}
    for column in columns:
        value = row[column]
        if isinstance(value, (Decimal, float)):
            value = decimal_str(Decimal(str(value)))
        payload[column] = value
    return payload


class ProfitReportingService:
    """Reads pre-aggregated figures; the database view owns every profit formula."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = ProfitRepository(db)

    # ---------- Reports ----------
    def project_profit(self, project_id: int, *, cost_type: str = "standard") -> dict[str, object] | None:
        # Only standard-cost figures are materialized.
        row = self.repo.project_profit(project_id)
        if row is None:
            return None
        return _serialize_row(row, PROJECT_PROFIT_COLUMNS)

    def pm_profit(self, pm_employee_id: int) -> list[dict[str, object]]:
        return [_serialize_row(row, PROJECT_PROFIT_COLUMNS) for row in self.repo.pm_profit(pm_employee_id)]

    def all_project_profit(self) -> list[dict[str, object]]:
        return [_serialize_row(row, PROJECT_PROFIT_COLUMNS) for row in self.repo.all_project_profit()]

    def client_revenue(self, client_id: int) -> dict[str, object] | None:
        row = self.repo.client_revenue(client_id)
        if row is None:
            return None
        return _serialize_row(row, ("client_id", "client_name", "total_revenue"))

    # ---------- Dashboard ----------
    def dashboard_summary(self) -> dict[str, object]:
        return {
            "total_revenue": decimal_str(Decimal(str(self.repo.total_revenue()))),
            "total_projects": self.repo.in_progress_project_count(),
        }

    def pm_ranking(self) -> list[dict[str, object]]:
        return [
            _serialize_row(row, PM_RANKING_COLUMNS)
            for row in self.repo.pm_ranking(limit=PM_RANKING_LIMIT)
        ]

    def alerts(self) -> list[dict[str, object]]:
        return [_serialize_row(row, ALERT_COLUMNS) for row in self.repo.loss_projects()]

    # ---------- Exports ----------
    def export_report(self, *, report_key: str, format_name: str) -> ExportFilePayload:
        normalized_key = report_key.strip().lower()
        normalized_format = format_name.strip().lower()
        if normalized_format not in EXPORT_FORMATS:
            raise AppError(
                status.HTTP_400_BAD_REQUEST,
                "VALIDATION_ERROR",
                "format は csv または xlsx を指定してください",
            )

        report_dispatch: dict[str, tuple[Callable[[], list[dict[str, object]]], tuple[str, ...]]] = {
            "project-profit": (self.all_project_profit, PROJECT_PROFIT_COLUMNS),
            "pm-ranking": (self.pm_ranking, PM_RANKING_COLUMNS),
            "alerts": (self.alerts, ALERT_COLUMNS),
        }
        dispatch = report_dispatch.get(normalized_key)
        if dispatch is None:
            raise not_found("指定されたレポートは存在しません")

        report_func, fieldnames = dispatch
        rows = report_func()

        if normalized_format == "csv":
            sio = io.StringIO()
            writer = csv.DictWriter(sio, fieldnames=list(fieldnames))
            writer.writeheader()
            writer.writerows(rows)
            return ExportFilePayload(
                media_type="text/csv; charset=utf-8",
                filename=f"{normalized_key}.csv",
                content=sio.getvalue().encode("utf-8-sig"),
            )

        # XLSX
        from openpyxl import Workbook

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = normalized_key
        sheet.append(list(fieldnames))
        for row in rows:
            sheet.append([row.get(column, "") for column in fieldnames])

        output = io.BytesIO()
        workbook.save(output)
        return ExportFilePayload(
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=f"{normalized_key}.xlsx",
            content=output.getvalue(),
        )
