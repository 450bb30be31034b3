"""Helpers shared by the application services."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import fields
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from profit_tracker.core.errors import conflict, validation_error
from profit_tracker.models.entities import ResourceType, utcnow


def normalize_month_start(value: date, field_name: str) -> date:
    if value.day != 1:
        raise validation_error(f"{field_name} は月初日で指定してください")
    return date(value.year, value.month, 1)


def validate_resource(resource_type: ResourceType, employee_id: int | None, partner_id: int | None) -> None:
    """An employee row needs ``employee_id``; a partner row needs ``partner_id``."""

    if resource_type is ResourceType.EMPLOYEE and employee_id is None:
        raise validation_error("社員を指定してください")
    if resource_type is ResourceType.PARTNER and partner_id is None:
        raise validation_error("パートナーを指定してください")


def apply_changes(entity: object, data: object) -> None:
    """Copy every non-null field of ``data`` onto ``entity`` and touch ``updated_at``."""

    for field in fields(data):
        value = getattr(data, field.name)
        if value is not None:
            setattr(entity, field.name, value)
    entity.updated_at = utcnow()


def soft_delete(entity: object) -> None:
    now = utcnow()
    entity.deleted_at = now
    entity.updated_at = now


@contextmanager
def write_transaction(db: Session) -> Iterator[None]:
    """Commit on success; roll back on any error and map constraint failures to 409."""

    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise conflict() from exc
    except Exception:
        db.rollback()
        raise
