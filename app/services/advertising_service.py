"""
Advertising budget service layer.

All database access for the ``/api/advertising`` endpoints lives here.
Each public function checks project ownership first, so a rejected call
never reaches a write.

Design notes
------------
- The 12-month view is materialised in Python from a sparse set of
  ``MonthlyAdvertisingSpend`` rows; months without a row are zero-filled
  and nothing is written while reading.
- ``ProjectMonth`` and ``MonthlyAdvertisingSpend`` are each unique on
  ``(project_id, year, month)``.  The writer uses a dialect-level
  ``INSERT ... ON CONFLICT`` keyed on that triple, so two concurrent saves
  of the same month end as one insert plus one update instead of a
  duplicate row or a lost update.  PostgreSQL and SQLite (test env) are
  both supported.
- Budget utilisation and variance percentage are recomputed from the
  planned/actual pair on every write and every read; division by a zero
  budget yields 0.0.
- Amounts are rounded to the cent before anything is derived from them,
  so the figures a write returns are the ones a later read shows.
- The whole call commits once, at the end; a failure before that leaves
  the session to be discarded by ``get_db`` with nothing persisted.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.monthly_advertising_spend import MonthlyAdvertisingSpend
from app.models.project_month import ProjectMonth
from app.schemas.advertising import (
    MonthlyBudgetQuery,
    MonthlyBudgetResponse,
    MonthlyBudgetSave,
    MonthlyBudgetUpdate,
)
from app.services.project_service import require_project_owner
from app.utils.constants import DEFAULT_MEDIA_TYPE, MEDIA_TYPE_SPEND_COLUMN, MONTHS
from app.utils.identifiers import new_id

logger = logging.getLogger(__name__)

_PERIOD_COLUMNS: list[str] = ["project_id", "year", "month"]
_CENTS = Decimal("0.01")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dec(value: float) -> Decimal:
    """Convert a float amount to a two-decimal ``Decimal`` for Numeric columns."""
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _to_float(value: Decimal | float | None) -> float:
    return float(value) if value is not None else 0.0


def _cents(value: float) -> float:
    """Round an amount to the cent, as it will be stored."""
    return float(_dec(value))


def _utilization(planned: float, actual: float) -> float:
    """Return actual / planned × 100, or 0.0 when nothing was planned."""
    if planned <= 0:
        return 0.0
    return (actual / planned) * 100


def _variance_percentage(planned: float, actual: float) -> float:
    """Return (actual − planned) / planned × 100, or 0.0 when nothing was planned."""
    if planned <= 0:
        return 0.0
    return ((actual - planned) / planned) * 100


def _spend_column(media_type: str) -> str | None:
    """Return the spend bucket column written for *media_type*, if any."""
    column = MEDIA_TYPE_SPEND_COLUMN.get(media_type)
    if column is None:
        logger.warning(
            "media_type=%s has no spend bucket; totals are updated, breakdown is not",
            media_type,
        )
    return column


def _period_key(project_id: str, year: int, month: int) -> str:
    """Synthetic ID for a month that has no stored record."""
    return f"{project_id}-{year}-{month}"


def _month_label(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def _build_response(
    record_id: str,
    project_id: str,
    year: int,
    month: int,
    planned: float,
    actual: float,
    media_type: str | None,
    notes: str | None,
) -> MonthlyBudgetResponse:
    return MonthlyBudgetResponse(
        id=record_id,
        project_id=project_id,
        year=year,
        month=month,
        planned_budget=planned,
        actual_spend=actual,
        variance=actual - planned,
        variance_percentage=_variance_percentage(planned, actual),
        media_type=media_type or DEFAULT_MEDIA_TYPE,
        notes=notes or "",
    )


def _dialect_insert(db: Session, model: Any) -> Any:
    """Return an INSERT construct for *model* that supports ON CONFLICT.

    Raises:
        RuntimeError: If the bound database is neither PostgreSQL nor SQLite.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise RuntimeError(f"Unsupported database dialect for upsert: {dialect}")


def _find_spend_record(
    db: Session, project_id: str, year: int, month: int
) -> MonthlyAdvertisingSpend | None:
    return (
        db.query(MonthlyAdvertisingSpend)
        .filter(
            MonthlyAdvertisingSpend.project_id == project_id,
            MonthlyAdvertisingSpend.year == year,
            MonthlyAdvertisingSpend.month == month,
        )
        .first()
    )


def _find_project_month(
    db: Session, project_id: str, year: int, month: int
) -> ProjectMonth | None:
    return (
        db.query(ProjectMonth)
        .filter(
            ProjectMonth.project_id == project_id,
            ProjectMonth.year == year,
            ProjectMonth.month == month,
        )
        .first()
    )


def _get_or_create_project_month(
    db: Session, project_id: str, year: int, month: int, user_id: str
) -> ProjectMonth:
    """Return the ProjectMonth of the period, inserting it on first use.

    The insert is ``ON CONFLICT DO NOTHING``: if another request created
    the row in between, that row is returned instead.
    """
    project_month = _find_project_month(db, project_id, year, month)
    if project_month is not None:
        return project_month

    month_id = new_id()
    stmt = (
        _dialect_insert(db, ProjectMonth)
        .values(
            id=month_id,
            project_id=project_id,
            year=year,
            month=month,
            month_label=_month_label(year, month),
            currency=get_settings().DEFAULT_CURRENCY,
            created_by_id=user_id,
            updated_by_id=user_id,
        )
        .on_conflict_do_nothing(index_elements=_PERIOD_COLUMNS)
    )
    result = db.execute(stmt)
    if result.rowcount:
        logger.info(
            "Created project_month id=%s project_id=%s label=%s",
            month_id, project_id, _month_label(year, month),
        )
    else:
        logger.info(
            "project_month %s for project_id=%s created concurrently; reusing it",
            _month_label(year, month), project_id,
        )

    project_month = _find_project_month(db, project_id, year, month)
    if project_month is None:  # pragma: no cover
        raise RuntimeError(
            f"project_month {_month_label(year, month)} missing after insert"
        )
    return project_month


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------


def get_monthly_budgets(
    db: Session, query: MonthlyBudgetQuery, user_id: str
) -> list[MonthlyBudgetResponse]:
    """Return the 12-month budget view of a project for one year.

    Months without a stored record are zero-filled, so the result always
    has exactly 12 entries ordered January → December.

    Args:
        db: Active SQLAlchemy session.
        query: Project and year to view.
        user_id: Acting user; must own the project.

    Returns:
        Twelve ``MonthlyBudgetResponse`` items.

    Raises:
        HTTPException 403: If the user does not own the project.
    """
    require_project_owner(db, query.project_id, user_id)

    records = (
        db.query(MonthlyAdvertisingSpend)
        .filter(
            MonthlyAdvertisingSpend.project_id == query.project_id,
            MonthlyAdvertisingSpend.year == query.year,
        )
        .order_by(MonthlyAdvertisingSpend.month)
        .all()
    )
    by_month: dict[int, MonthlyAdvertisingSpend] = {r.month: r for r in records}

    items: list[MonthlyBudgetResponse] = []
    for month in MONTHS:
        record = by_month.get(month)
        if record is None:
            items.append(
                _build_response(
                    _period_key(query.project_id, query.year, month),
                    query.project_id, query.year, month,
                    0.0, 0.0, None, None,
                )
            )
            continue
        items.append(
            _build_response(
                record.id,
                query.project_id, query.year, month,
                _to_float(record.total_budget),
                _to_float(record.total_spend),
                record.media_type,
                record.notes,
            )
        )

    logger.debug(
        "get_monthly_budgets: project_id=%s year=%d stored=%d",
        query.project_id, query.year, len(records),
    )
    return items


def save_monthly_budget(
    db: Session, data: MonthlyBudgetSave, user_id: str
) -> MonthlyBudgetResponse:
    """Create or update the budget of one month.

    Ensures the period's ``ProjectMonth`` exists, then upserts the
    ``MonthlyAdvertisingSpend`` row: totals, utilisation, media type,
    notes, the one spend bucket selected by ``media_type`` and the
    generation stamp.  Other buckets are left untouched.

    Args:
        db: Active SQLAlchemy session.
        data: Validated payload.
        user_id: Acting user; must own the project.

    Returns:
        The effective ``MonthlyBudgetResponse`` of the saved month.

    Raises:
        HTTPException 403: If the user does not own the project.
    """
    project = require_project_owner(db, data.project_id, user_id)
    project_month = _get_or_create_project_month(
        db, data.project_id, data.year, data.month, user_id
    )

    planned = _cents(data.planned_budget)
    actual = _cents(data.actual_spend)

    now = _utcnow()
    figures: dict[str, Any] = {
        "total_budget": _dec(planned),
        "total_spend": _dec(actual),
        "budget_utilization": _dec(_utilization(planned, actual)),
        "media_type": data.media_type,
        "notes": data.notes,
        "generated_at": now,
        "generated_by_id": user_id,
    }
    column = _spend_column(data.media_type)
    if column is not None:
        figures[column] = _dec(actual)

    record_id = new_id()
    stmt = _dialect_insert(db, MonthlyAdvertisingSpend).values(
        id=record_id,
        project_id=data.project_id,
        project_month_id=project_month.id,
        organization_id=project.organization_id,
        year=data.year,
        month=data.month,
        currency=get_settings().DEFAULT_CURRENCY,
        created_at=now,
        **figures,
    )
    stmt = stmt.on_conflict_do_update(index_elements=_PERIOD_COLUMNS, set_=figures)
    db.execute(stmt)
    db.commit()

    stored_id: str = (
        db.query(MonthlyAdvertisingSpend.id)
        .filter(
            MonthlyAdvertisingSpend.project_id == data.project_id,
            MonthlyAdvertisingSpend.year == data.year,
            MonthlyAdvertisingSpend.month == data.month,
        )
        .scalar()
    )
    logger.info(
        "save_monthly_budget: %s id=%s project_id=%s period=%s planned=%.2f actual=%.2f",
        "created" if stored_id == record_id else "updated",
        stored_id, data.project_id, _month_label(data.year, data.month),
        planned, actual,
    )

    return _build_response(
        stored_id,
        data.project_id, data.year, data.month,
        planned, actual,
        data.media_type, data.notes,
    )


def update_monthly_budget(
    db: Session, data: MonthlyBudgetUpdate, user_id: str
) -> MonthlyBudgetResponse:
    """Apply a partial update to an existing month.

    Supplied fields replace the stored ones; omitted (or null) fields keep
    their value.  Utilisation is recomputed from the merged figures.  When
    ``actual_spend`` or ``media_type`` is supplied, the bucket of the
    merged media type receives the merged actual spend.  This call never
    creates a period.

    Args:
        db: Active SQLAlchemy session.
        data: Validated partial payload.
        user_id: Acting user; must own the project.

    Returns:
        The effective ``MonthlyBudgetResponse`` after the merge.

    Raises:
        HTTPException 422: If ``project_id``, ``year`` or ``month`` is missing.
        HTTPException 403: If the user does not own the project.
        HTTPException 404: If the month has no stored record.
    """
    if not data.project_id or data.year is None or data.month is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Project ID, year, and month are required",
        )

    require_project_owner(db, data.project_id, user_id)

    record = _find_spend_record(db, data.project_id, data.year, data.month)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=(
                f"No advertising budget for project {data.project_id} "
                f"in {_month_label(data.year, data.month)}."
            ),
        )

    supplied = {
        field: value
        for field, value in data.model_dump(
            exclude_unset=True, exclude={"id", "project_id", "year", "month"}
        ).items()
        if value is not None
    }

    planned = _cents(supplied.get("planned_budget", _to_float(record.total_budget)))
    actual = _cents(supplied.get("actual_spend", _to_float(record.total_spend)))
    media_type = supplied.get("media_type", record.media_type or DEFAULT_MEDIA_TYPE)
    notes = supplied.get("notes", record.notes)

    if "planned_budget" in supplied:
        record.total_budget = _dec(planned)
    if "actual_spend" in supplied:
        record.total_spend = _dec(actual)
    if "media_type" in supplied:
        record.media_type = media_type
    if "notes" in supplied:
        record.notes = notes
    if "actual_spend" in supplied or "media_type" in supplied:
        column = _spend_column(media_type)
        if column is not None:
            setattr(record, column, _dec(actual))
    record.budget_utilization = _dec(_utilization(planned, actual))
    record.generated_at = _utcnow()
    record.generated_by_id = user_id

    db.commit()

    logger.info(
        "update_monthly_budget: id=%s period=%s fields=%s",
        record.id, _month_label(data.year, data.month), sorted(supplied),
    )

    return _build_response(
        record.id,
        data.project_id, data.year, data.month,
        planned, actual, media_type, notes,
    )
