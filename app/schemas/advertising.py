"""
Pydantic v2 schemas for the advertising budget endpoints.

These models define the exact JSON shapes consumed and returned by
``app/routers/advertising.py``.  Range checks on ``year``, ``month`` and
the amounts run here, before any service code is reached.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.utils.constants import YEAR_MAX, YEAR_MIN

MediaType = Literal["digital", "tv", "newspaper", "magazine", "outdoor", "radio", "other"]


# ---------------------------------------------------------------------------
# Input schemas
# ---------------------------------------------------------------------------


class MonthlyBudgetQuery(BaseModel):
    """Selector for the 12-month view of one project and year.

    Attributes:
        project_id: Project whose budgets are listed.
        year: Calendar year (2020–2030).
    """

    project_id: str = Field(..., min_length=1, description="Project ID.")
    year: int = Field(..., ge=YEAR_MIN, le=YEAR_MAX, description="Calendar year.")


class MonthlyBudgetSave(BaseModel):
    """Payload for the create-or-update write of one month.

    Attributes:
        project_id: Target project.
        year: Calendar year (2020–2030).
        month: Month number (1–12).
        planned_budget: Planned budget, non-negative.
        actual_spend: Actual spend, non-negative.
        media_type: Media tag selecting the spend bucket.
        notes: Optional free text.
    """

    project_id: str = Field(..., min_length=1, description="Project ID.")
    year: int = Field(..., ge=YEAR_MIN, le=YEAR_MAX)
    month: int = Field(..., ge=1, le=12)
    planned_budget: float = Field(..., ge=0, description="Planned budget for the month.")
    actual_spend: float = Field(..., ge=0, description="Actual spend for the month.")
    media_type: MediaType
    notes: str | None = Field(default=None, max_length=2000)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "project_id": "3f7c2a9e4b1d4c8e9a6b5d4c3b2a1f0e",
                "year": 2024,
                "month": 3,
                "planned_budget": 100_000.0,
                "actual_spend": 120_000.0,
                "media_type": "digital",
                "notes": "Spring campaign",
            }
        }
    )


class MonthlyBudgetUpdate(BaseModel):
    """Payload for the partial update of an existing month.

    Every field is optional at the schema level; the service rejects the
    request when ``project_id``, ``year`` or ``month`` is missing.  Fields
    left out keep their stored value.  ``id`` is accepted for clients that
    echo back the record they read, but the month is always located by
    ``(project_id, year, month)``.
    """

    id: str | None = Field(default=None, description="Record ID as read; not used for lookup.")
    project_id: str | None = Field(default=None, min_length=1)
    year: int | None = Field(default=None, ge=YEAR_MIN, le=YEAR_MAX)
    month: int | None = Field(default=None, ge=1, le=12)
    planned_budget: float | None = Field(default=None, ge=0)
    actual_spend: float | None = Field(default=None, ge=0)
    media_type: MediaType | None = None
    notes: str | None = Field(default=None, max_length=2000)


# ---------------------------------------------------------------------------
# Output schema
# ---------------------------------------------------------------------------


class MonthlyBudgetResponse(BaseModel):
    """One month of the budget view: planned vs actual and their variance.

    Attributes:
        id: Record ID, or ``"{project_id}-{year}-{month}"`` for a month
            that has no stored record yet.
        project_id: Project ID.
        year: Calendar year.
        month: Month number (1–12).
        planned_budget: Planned budget (0 when absent).
        actual_spend: Actual spend (0 when absent).
        variance: actual_spend − planned_budget.
        variance_percentage: variance / planned_budget × 100, 0 without budget.
        media_type: Stored media tag, ``"digital"`` when absent.
        notes: Stored notes, ``""`` when absent.
    """

    id: str
    project_id: str
    year: int
    month: int
    planned_budget: float
    actual_spend: float
    variance: float
    variance_percentage: float
    media_type: str
    notes: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "9d2f0c1b7a6e4d3c8b5a4f3e2d1c0b9a",
                "project_id": "3f7c2a9e4b1d4c8e9a6b5d4c3b2a1f0e",
                "year": 2024,
                "month": 3,
                "planned_budget": 100_000.0,
                "actual_spend": 120_000.0,
                "variance": 20_000.0,
                "variance_percentage": 20.0,
                "media_type": "digital",
                "notes": "Spring campaign",
            }
        }
    )
