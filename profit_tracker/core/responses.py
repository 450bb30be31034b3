"""Success envelope and value formatting shared by all endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal

Q2 = Decimal("0.01")


def q2(value: Decimal) -> Decimal:
    return value.quantize(Q2)


def decimal_str(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return str(q2(Decimal(value)))


def iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def ok(data: object) -> dict[str, object]:
    return {"success": True, "data": data}


def ok_list(items: Sequence[object]) -> dict[str, object]:
    return {"success": True, "data": list(items), "meta": {"total": len(items)}}


def deleted(message: str) -> dict[str, object]:
    return {"success": True, "data": {"message": message}}
