"""
Tests for building resolved plan entries from weekly and monthly drafts.
"""

from decimal import Decimal

import pytest

from app.exceptions import PlanBuildError
from domain.enums import PlanType
from services.monthly_assignor import AddDate, MonthlyAssignments, SetMeal, apply_all as apply_dates
from services.plan_builder import (
    PlanMeta,
    build,
    build_date_entries,
    check_date_in_range,
    requires_date_assignment,
)
from services.weekly_scheduler import WeeklySchedule, WeeklySlot
from test_fixtures import GREEN_VALLEY, catalog_meal, d, override


CATALOG = [
    catalog_meal(1, "hot_meal", "12.00"),
    catalog_meal(2, "sandwich", "6.00"),
    catalog_meal(7, "hot_meal", "12.00"),
]
OVERRIDES = [override(7, "15.00"), override(2, "4.00", is_active=False)]

WEEKLY = PlanMeta(school_id=GREEN_VALLEY, start_date=d("2024-09-01"), end_date=d("2024-12-19"))
MONTHLY = PlanMeta(
    school_id=GREEN_VALLEY,
    start_date=d("2024-10-01"),
    end_date=d("2024-10-05"),
    plan_type=PlanType.MONTHLY,
)


def _weekly(**days):
    schedule = WeeklySchedule()
    for key, slots in days.items():
        schedule = schedule.with_day(int(key[1:]), [WeeklySlot(category=c, meal_id=m) for c, m in slots])
    return schedule


def _dates(*pairs):
    ops = []
    for day, meal_id in pairs:
        ops.append(AddDate(d(day)))
        if meal_id:
            ops.append(SetMeal(d(day), meal_id))
    return apply_dates(MonthlyAssignments(), ops)


# =============================================================================
# WEEKLY
# =============================================================================


def test_weekly_entries_carry_resolved_prices():
    schedule = _weekly(d1=[("hot_meal", 7), ("sandwich", 2)], d3=[("hot_meal", 1)])

    entries = build(WEEKLY, schedule, CATALOG, OVERRIDES)

    assert [(e.day_of_week, e.meal_id, e.order) for e in entries] == [(1, 7, 1), (1, 2, 2), (3, 1, 1)]
    m7 = entries[0]
    assert m7.price == Decimal("15.00")
    assert m7.base_price == Decimal("12.00")
    assert m7.school_price == Decimal("15.00")
    # inactive override falls back to base price
    assert entries[1].price == Decimal("6.00")
    assert entries[1].school_price is None


def test_incomplete_slots_are_dropped():
    schedule = _weekly(d2=[("hot_meal", None), (None, None), ("hot_meal", 1)])

    entries = build(WEEKLY, schedule, CATALOG, [])

    assert [(e.meal_id, e.order) for e in entries] == [(1, 3)]


def test_all_slots_incomplete_is_an_error():
    schedule = _weekly(d2=[("hot_meal", None)])

    with pytest.raises(PlanBuildError) as exc:
        build(WEEKLY, schedule, CATALOG, [])
    assert exc.value.code == "NO_MEALS"


def test_unknown_meal_is_reported():
    schedule = _weekly(d1=[("hot_meal", 99)])

    with pytest.raises(PlanBuildError) as exc:
        build(WEEKLY, schedule, CATALOG, [])
    assert exc.value.code == "UNKNOWN_MEAL"
    assert exc.value.details == {"meal_ids": [99]}


def test_meal_from_other_category_is_reported():
    schedule = _weekly(d4=[("burger", 2)])

    with pytest.raises(PlanBuildError) as exc:
        build(WEEKLY, schedule, CATALOG, [])
    assert exc.value.code == "CATEGORY_MISMATCH"


def test_school_is_required():
    meta = PlanMeta(school_id=None, start_date=d("2024-09-01"), end_date=d("2024-09-30"))

    with pytest.raises(PlanBuildError) as exc:
        build(meta, _weekly(d1=[("hot_meal", 1)]), CATALOG, [])
    assert exc.value.code == "SCHOOL_REQUIRED"


def test_inverted_date_range_is_rejected():
    meta = PlanMeta(school_id=GREEN_VALLEY, start_date=d("2024-09-30"), end_date=d("2024-09-01"))

    with pytest.raises(PlanBuildError) as exc:
        build(meta, _weekly(d1=[("hot_meal", 1)]), CATALOG, [])
    assert exc.value.code == "INVALID_DATE_RANGE"


def test_draft_must_match_plan_type():
    with pytest.raises(PlanBuildError) as exc:
        build(WEEKLY, MonthlyAssignments(), CATALOG, [])
    assert exc.value.code == "INVALID_DRAFT"

    with pytest.raises(PlanBuildError) as exc:
        build(MONTHLY, WeeklySchedule(), CATALOG, [])
    assert exc.value.code == "INVALID_DRAFT"


# =============================================================================
# MONTHLY
# =============================================================================


def test_monthly_entries_use_meal_category_and_dates():
    assignments = _dates(("2024-10-03", 2), ("2024-10-01", 7), ("2024-10-04", None))

    entries = build(MONTHLY, assignments, CATALOG, OVERRIDES)

    assert [(e.meal_date, e.meal_id, e.category) for e in entries] == [
        (d("2024-10-03"), 2, "sandwich"),
        (d("2024-10-01"), 7, "hot_meal"),
    ]
    assert entries[1].price == Decimal("15.00")
    assert all(e.day_of_week is None for e in entries)


def test_monthly_date_outside_plan_is_rejected():
    assignments = _dates(("2024-10-06", 2))

    with pytest.raises(PlanBuildError) as exc:
        build(MONTHLY, assignments, CATALOG, [])
    assert exc.value.code == "DATE_OUT_OF_RANGE"


def test_plan_bounds_are_inclusive():
    check_date_in_range(MONTHLY, d("2024-10-01"))
    check_date_in_range(MONTHLY, d("2024-10-05"))


def test_build_date_entries_requires_a_complete_assignment():
    with pytest.raises(PlanBuildError) as exc:
        build_date_entries(MONTHLY, _dates(("2024-10-02", None)), CATALOG, [])
    assert exc.value.code == "NO_MEALS"


def test_only_monthly_plans_need_date_assignment():
    assert requires_date_assignment(MONTHLY)
    assert not requires_date_assignment(WEEKLY)
