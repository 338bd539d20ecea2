"""
Advertising budget router.

Mounts under ``/api/advertising`` (prefix set in ``main.py``).

All endpoints require a valid JWT token (``get_current_user`` dependency)
and, inside the service, ownership of the target project.

Endpoints
---------
GET   /budget/monthly — 12-month planned vs actual view of a project/year.
POST  /budget/monthly — Create or update one month's budget.
PATCH /budget/monthly — Partial update of an existing month's budget.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.advertising import (
    MonthlyBudgetQuery,
    MonthlyBudgetResponse,
    MonthlyBudgetSave,
    MonthlyBudgetUpdate,
)
from app.services import advertising_service
from app.services.auth_service import get_current_user
from app.utils.constants import YEAR_MAX, YEAR_MIN

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Advertising"])


def _budget_query(
    project_id: Annotated[str, Query(description="Project ID.", min_length=1)],
    year: Annotated[
        int,
        Query(description="Calendar year, e.g. 2024.", ge=YEAR_MIN, le=YEAR_MAX),
    ],
) -> MonthlyBudgetQuery:
    """Assemble a ``MonthlyBudgetQuery`` from URL query parameters."""
    return MonthlyBudgetQuery(project_id=project_id, year=year)


# ---------------------------------------------------------------------------
# GET /budget/monthly
# ---------------------------------------------------------------------------


@router.get(
    "/budget/monthly",
    response_model=list[MonthlyBudgetResponse],
    summary="Monthly advertising budgets of a project",
    description=(
        "Returns exactly 12 entries (January to December) with planned budget, "
        "actual spend and variance. Months without data are zero-filled."
    ),
    responses={
        200: {"description": "Twelve monthly entries."},
        401: {"description": "Missing or invalid JWT."},
        403: {"description": "Project not found or not owned by the caller."},
    },
)
def get_monthly_budgets(
    query: Annotated[MonthlyBudgetQuery, Depends(_budget_query)],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[MonthlyBudgetResponse]:
    logger.debug(
        "GET /advertising/budget/monthly project_id=%s year=%d user=%s",
        query.project_id, query.year, current_user.id,
    )
    return advertising_service.get_monthly_budgets(db, query, current_user.id)


# ---------------------------------------------------------------------------
# POST /budget/monthly
# ---------------------------------------------------------------------------


@router.post(
    "/budget/monthly",
    response_model=MonthlyBudgetResponse,
    summary="Save a month's advertising budget",
    description=(
        "Creates the month's budget record, or updates it if one exists. "
        "The media type selects which spend category receives the actual spend."
    ),
    responses={
        200: {"description": "Effective budget of the saved month."},
        401: {"description": "Missing or invalid JWT."},
        403: {"description": "Project not found or not owned by the caller."},
        422: {"description": "Invalid payload."},
    },
)
def save_monthly_budget(
    data: MonthlyBudgetSave,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MonthlyBudgetResponse:
    """Create-or-update the budget of one month.

    Args:
        data: Validated payload from the request body.
        db: Database session injected by ``get_db``.
        current_user: Authenticated caller; must own the project.

    Returns:
        The effective ``MonthlyBudgetResponse``.
    """
    logger.info(
        "POST /advertising/budget/monthly project_id=%s period=%d-%02d user=%s",
        data.project_id, data.year, data.month, current_user.id,
    )
    return advertising_service.save_monthly_budget(db, data, current_user.id)


# ---------------------------------------------------------------------------
# PATCH /budget/monthly
# ---------------------------------------------------------------------------


@router.patch(
    "/budget/monthly",
    response_model=MonthlyBudgetResponse,
    summary="Partially update a month's advertising budget",
    description=(
        "Updates only the supplied fields of an existing month. "
        "project_id, year and month identify the month and are required."
    ),
    responses={
        200: {"description": "Effective budget after the update."},
        401: {"description": "Missing or invalid JWT."},
        403: {"description": "Project not found or not owned by the caller."},
        404: {"description": "The month has no budget record."},
        422: {"description": "Missing identifying fields or invalid payload."},
    },
)
def update_monthly_budget(
    data: MonthlyBudgetUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MonthlyBudgetResponse:
    logger.info(
        "PATCH /advertising/budget/monthly project_id=%s year=%s month=%s user=%s",
        data.project_id, data.year, data.month, current_user.id,
    )
    return advertising_service.update_monthly_budget(db, data, current_user.id)
