"""Tests for the advertising budget service (view, writer, patch-updater)."""

import pytest
from fastapi import HTTPException

from app.models import MonthlyAdvertisingSpend, ProjectMonth
from app.schemas.advertising import (
    MonthlyBudgetQuery,
    MonthlyBudgetSave,
    MonthlyBudgetUpdate,
)
from app.services import advertising_service
from app.utils.constants import MEDIA_TYPE_SPEND_COLUMN, MEDIA_TYPES, SPEND_BUCKET_COLUMNS


def _save(db, user_id, month=3, planned=100_000, actual=120_000, media_type="digital", notes="", year=2024):
    return advertising_service.save_monthly_budget(
        db,
        MonthlyBudgetSave(
            project_id="proj-1",
            year=year,
            month=month,
            planned_budget=planned,
            actual_spend=actual,
            media_type=media_type,
            notes=notes,
        ),
        user_id,
    )


def _records(db):
    db.expire_all()
    return db.query(MonthlyAdvertisingSpend).all()


# ---------------------------------------------------------------------------
# get_monthly_budgets
# ---------------------------------------------------------------------------


def test_view_without_records_is_twelve_zero_months(db, project, owner):
    items = advertising_service.get_monthly_budgets(
        db, MonthlyBudgetQuery(project_id="proj-1", year=2024), owner.id
    )

    assert [i.month for i in items] == list(range(1, 13))
    for item in items:
        assert item.planned_budget == 0
        assert item.actual_spend == 0
        assert item.variance == 0
        assert item.variance_percentage == 0
        assert item.media_type == "digital"
        assert item.notes == ""
        assert item.id == f"proj-1-2024-{item.month}"


def test_view_does_not_create_records(db, project, owner):
    advertising_service.get_monthly_budgets(
        db, MonthlyBudgetQuery(project_id="proj-1", year=2024), owner.id
    )

    assert _records(db) == []
    assert db.query(ProjectMonth).count() == 0


def test_view_fills_gaps_around_stored_month(db, project, owner):
    saved = _save(db, owner.id, month=3, notes="Spring")

    items = advertising_service.get_monthly_budgets(
        db, MonthlyBudgetQuery(project_id="proj-1", year=2024), owner.id
    )

    assert len(items) == 12
    march = items[2]
    assert march.id == saved.id
    assert march.planned_budget == 100_000
    assert march.actual_spend == 120_000
    assert march.variance == 20_000
    assert march.variance_percentage == pytest.approx(20.0)
    assert march.notes == "Spring"
    others = [i for i in items if i.month != 3]
    assert all(i.planned_budget == 0 and i.actual_spend == 0 for i in others)


def test_view_ignores_other_years(db, project, owner):
    _save(db, owner.id, month=5, year=2023)

    items = advertising_service.get_monthly_budgets(
        db, MonthlyBudgetQuery(project_id="proj-1", year=2024), owner.id
    )

    assert all(i.actual_spend == 0 for i in items)


def test_view_with_zero_budget_has_zero_variance_percentage(db, project, owner):
    _save(db, owner.id, month=7, planned=0, actual=5_000)

    items = advertising_service.get_monthly_budgets(
        db, MonthlyBudgetQuery(project_id="proj-1", year=2024), owner.id
    )

    july = items[6]
    assert july.variance == 5_000
    assert july.variance_percentage == 0


def test_view_denied_for_non_owner(db, project, member):
    with pytest.raises(HTTPException) as exc_info:
        advertising_service.get_monthly_budgets(
            db, MonthlyBudgetQuery(project_id="proj-1", year=2024), member.id
        )
    assert exc_info.value.status_code == 403


def test_view_denied_for_unknown_project(db, project, owner):
    with pytest.raises(HTTPException) as exc_info:
        advertising_service.get_monthly_budgets(
            db, MonthlyBudgetQuery(project_id="missing", year=2024), owner.id
        )
    assert exc_info.value.status_code == 403


# ---------------------------------------------------------------------------
# save_monthly_budget
# ---------------------------------------------------------------------------


def test_save_creates_month_group_and_record(db, project, owner):
    result = _save(db, owner.id)

    assert result.variance == 20_000
    assert result.variance_percentage == pytest.approx(20.0)
    assert result.media_type == "digital"

    records = _records(db)
    assert len(records) == 1
    record = records[0]
    assert record.id == result.id
    assert record.organization_id == "org-1"
    assert float(record.total_budget) == 100_000
    assert float(record.total_spend) == 120_000
    assert float(record.budget_utilization) == pytest.approx(120.0)
    assert float(record.online_spend) == 120_000
    assert float(record.broadcast_spend) == 0
    assert record.generated_by_id == owner.id

    project_month = db.query(ProjectMonth).one()
    assert project_month.month_label == "2024-03"
    assert project_month.created_by_id == owner.id
    assert project_month.updated_by_id == owner.id
    assert record.project_month_id == project_month.id


def test_save_twice_updates_instead_of_duplicating(db, project, owner):
    first = _save(db, owner.id)
    second = _save(db, owner.id)

    records = _records(db)
    assert len(records) == 1
    assert first.id == second.id == records[0].id
    assert float(records[0].total_budget) == 100_000
    assert float(records[0].total_spend) == 120_000
    assert db.query(ProjectMonth).count() == 1


def test_save_update_overwrites_totals_and_keeps_other_buckets(db, project, owner):
    _save(db, owner.id, planned=100_000, actual=120_000, media_type="digital")
    _save(db, owner.id, planned=90_000, actual=30_000, media_type="radio", notes="Radio push")

    record = _records(db)[0]
    assert float(record.total_budget) == 90_000
    assert float(record.total_spend) == 30_000
    assert float(record.broadcast_spend) == 30_000
    assert float(record.online_spend) == 120_000
    assert record.media_type == "radio"
    assert record.notes == "Radio push"


@pytest.mark.parametrize(
    "media_type, column",
    [
        ("digital", "online_spend"),
        ("tv", "broadcast_spend"),
        ("radio", "broadcast_spend"),
        ("newspaper", "print_spend"),
        ("magazine", "print_spend"),
        ("other", "other_spend"),
    ],
)
def test_save_sets_bucket_for_media_type(db, project, owner, media_type, column):
    _save(db, owner.id, actual=42_000, media_type=media_type)

    record = _records(db)[0]
    buckets = {c: float(getattr(record, c)) for c in SPEND_BUCKET_COLUMNS}
    assert buckets.pop(column) == 42_000
    assert set(buckets.values()) == {0}


def test_every_media_type_has_a_mapping_entry():
    assert set(MEDIA_TYPE_SPEND_COLUMN) == set(MEDIA_TYPES)
    assert {c for c in MEDIA_TYPE_SPEND_COLUMN.values() if c} <= set(SPEND_BUCKET_COLUMNS)


def test_save_outdoor_updates_totals_only(db, project, owner, caplog):
    with caplog.at_level("WARNING", logger="app.services.advertising_service"):
        result = _save(db, owner.id, planned=50_000, actual=50_000, media_type="outdoor")

    record = _records(db)[0]
    assert float(record.total_spend) == 50_000
    assert float(record.online_spend) == 0
    assert float(record.other_spend) == 0
    assert result.media_type == "outdoor"
    assert "no spend bucket" in caplog.text


def test_save_zero_budget_has_zero_utilization(db, project, owner):
    result = _save(db, owner.id, planned=0, actual=10_000)

    record = _records(db)[0]
    assert float(record.budget_utilization) == 0
    assert result.variance_percentage == 0
    assert result.variance == 10_000


def test_save_reuses_existing_project_month(db, project, owner):
    db.add(
        ProjectMonth(
            id="month-existing",
            project_id="proj-1",
            year=2024,
            month=3,
            month_label="2024-03",
            created_by_id=owner.id,
            updated_by_id=owner.id,
        )
    )
    db.commit()

    _save(db, owner.id)

    assert db.query(ProjectMonth).count() == 1
    assert _records(db)[0].project_month_id == "month-existing"


def test_save_recovers_when_month_group_created_concurrently(db, project, owner, monkeypatch):
    db.add(
        ProjectMonth(
            id="month-racer",
            project_id="proj-1",
            year=2024,
            month=3,
            month_label="2024-03",
            created_by_id=owner.id,
            updated_by_id=owner.id,
        )
    )
    db.commit()

    real_lookup = advertising_service._find_project_month
    calls = {"n": 0}

    def _stale_first_lookup(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_lookup(*args, **kwargs)

    monkeypatch.setattr(advertising_service, "_find_project_month", _stale_first_lookup)

    _save(db, owner.id)

    assert db.query(ProjectMonth).count() == 1
    assert _records(db)[0].project_month_id == "month-racer"


def test_save_onto_record_written_concurrently_updates_it(db, project, owner):
    db.add(
        MonthlyAdvertisingSpend(
            id="spend-racer",
            project_id="proj-1",
            year=2024,
            month=3,
            total_spend=1,
            total_budget=1,
            generated_by_id=owner.id,
        )
    )
    db.commit()

    result = _save(db, owner.id)

    records = _records(db)
    assert len(records) == 1
    assert result.id == "spend-racer"
    assert float(records[0].total_spend) == 120_000


def test_save_denied_for_non_owner_writes_nothing(db, project, member):
    with pytest.raises(HTTPException) as exc_info:
        _save(db, member.id)

    assert exc_info.value.status_code == 403
    assert _records(db) == []
    assert db.query(ProjectMonth).count() == 0


# ---------------------------------------------------------------------------
# update_monthly_budget
# ---------------------------------------------------------------------------


def _update(db, user_id, **fields):
    payload = {"project_id": "proj-1", "year": 2024, "month": 3}
    payload.update(fields)
    return advertising_service.update_monthly_budget(db, MonthlyBudgetUpdate(**payload), user_id)


def test_update_actual_only_keeps_other_fields(db, project, owner):
    _save(db, owner.id, planned=100_000, actual=120_000, media_type="tv", notes="Prime time")

    result = _update(db, owner.id, actual_spend=80_000)

    assert result.planned_budget == 100_000
    assert result.actual_spend == 80_000
    assert result.variance == -20_000
    assert result.variance_percentage == pytest.approx(-20.0)
    assert result.media_type == "tv"
    assert result.notes == "Prime time"

    record = _records(db)[0]
    assert float(record.total_budget) == 100_000
    assert float(record.total_spend) == 80_000
    assert float(record.budget_utilization) == pytest.approx(80.0)
    assert float(record.broadcast_spend) == 80_000
    assert record.media_type == "tv"
    assert record.notes == "Prime time"


def test_update_planned_only_recomputes_utilization(db, project, owner):
    _save(db, owner.id, planned=100_000, actual=50_000)

    result = _update(db, owner.id, planned_budget=200_000)

    assert result.actual_spend == 50_000
    assert result.variance_percentage == pytest.approx(-75.0)
    record = _records(db)[0]
    assert float(record.budget_utilization) == pytest.approx(25.0)
    assert float(record.online_spend) == 50_000


def test_update_notes_and_media_type(db, project, owner):
    _save(db, owner.id, actual=10_000, media_type="digital", notes="")

    result = _update(db, owner.id, media_type="newspaper", notes="Print run")

    assert result.media_type == "newspaper"
    assert result.notes == "Print run"
    record = _records(db)[0]
    assert record.media_type == "newspaper"
    assert float(record.print_spend) == 10_000


def test_update_stamps_generation_metadata(db, project, owner):
    _save(db, owner.id)
    before = _records(db)[0].generated_at

    _update(db, owner.id, actual_spend=1)

    record = _records(db)[0]
    assert record.generated_by_id == owner.id
    assert record.generated_at >= before


def test_update_without_record_is_not_found(db, project, owner):
    with pytest.raises(HTTPException) as exc_info:
        _update(db, owner.id, actual_spend=1_000)

    assert exc_info.value.status_code == 404
    assert _records(db) == []


@pytest.mark.parametrize("missing", ["project_id", "year", "month"])
def test_update_requires_identifying_fields(db, project, owner, missing):
    payload = {"project_id": "proj-1", "year": 2024, "month": 3, "actual_spend": 1.0}
    del payload[missing]

    with pytest.raises(HTTPException) as exc_info:
        advertising_service.update_monthly_budget(db, MonthlyBudgetUpdate(**payload), owner.id)

    assert exc_info.value.status_code == 422


def test_update_denied_for_non_owner(db, project, owner, member):
    _save(db, owner.id)

    with pytest.raises(HTTPException) as exc_info:
        _update(db, member.id, actual_spend=1)

    assert exc_info.value.status_code == 403
    assert float(_records(db)[0].total_spend) == 120_000


def test_update_ignores_record_id_and_uses_period(db, project, owner):
    saved = _save(db, owner.id)

    result = _update(db, owner.id, id="some-other-record", notes="Echoed id")

    assert result.id == saved.id
    assert _records(db)[0].notes == "Echoed id"


# ---------------------------------------------------------------------------
# Rounding and utilisation range
# ---------------------------------------------------------------------------


def _march(db, user_id):
    items = advertising_service.get_monthly_budgets(
        db, MonthlyBudgetQuery(project_id="proj-1", year=2024), user_id
    )
    return items[2]


def test_save_returns_the_figures_a_later_read_shows(db, project, owner):
    saved = _save(db, owner.id, planned=0.004, actual=10.006)

    assert saved.model_dump() == _march(db, owner.id).model_dump()
    assert saved.planned_budget == 0
    assert saved.actual_spend == pytest.approx(10.01)
    assert saved.variance_percentage == 0

    record = _records(db)[0]
    assert float(record.total_budget) == 0
    assert float(record.budget_utilization) == 0


def test_stored_utilization_matches_stored_amounts(db, project, owner):
    _save(db, owner.id, planned=3.333, actual=1.005)

    record = _records(db)[0]
    assert float(record.total_budget) == pytest.approx(3.33)
    assert float(record.total_spend) == pytest.approx(1.01)
    assert float(record.budget_utilization) == pytest.approx(30.33)


def test_update_returns_the_figures_a_later_read_shows(db, project, owner):
    _save(db, owner.id, planned=100, actual=50)

    updated = _update(db, owner.id, planned_budget=0.006, actual_spend=0.014)

    assert updated.model_dump() == _march(db, owner.id).model_dump()
    assert updated.planned_budget == pytest.approx(0.01)
    assert updated.actual_spend == pytest.approx(0.01)
    assert float(_records(db)[0].budget_utilization) == pytest.approx(100.0)


def test_save_with_large_spend_to_budget_ratio(db, project, owner):
    result = _save(db, owner.id, planned=100, actual=1_000_000_000)

    assert result.variance_percentage == pytest.approx(999_999_900.0)
    assert float(_records(db)[0].budget_utilization) == pytest.approx(1_000_000_000.0)


def test_utilization_column_holds_largest_possible_ratio():
    columns = MonthlyAdvertisingSpend.__table__.c
    amount = columns.total_spend.type
    utilization = columns.budget_utilization.type

    # Largest storable spend over the smallest non-zero budget (one cent), as a percentage
    largest_spend_digits = amount.precision - amount.scale
    largest_ratio_digits = largest_spend_digits + amount.scale + 2

    assert utilization.precision - utilization.scale >= largest_ratio_digits
