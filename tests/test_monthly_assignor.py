"""
Tests for monthly date assignments.
"""

from types import SimpleNamespace

import pytest

from app.exceptions import ServiceValidationError
from services.monthly_assignor import (
    AddDate,
    DateAssignment,
    MonthlyAssignments,
    RemoveDate,
    SetMeal,
    apply,
    apply_all,
    assignments_from_entries,
)
from test_fixtures import d


def test_add_then_set_meal_is_submitted():
    """Plan 2024-10-01..05: addDate(03), setMeal(03, M2) -> [{M2, 2024-10-03}]"""
    state = apply_all(MonthlyAssignments(), [AddDate(d("2024-10-03")), SetMeal(d("2024-10-03"), 2)])

    assert state.to_submission() == [DateAssignment(meal_date=d("2024-10-03"), meal_id=2)]


def test_dates_without_meal_are_not_submitted():
    state = apply_all(
        MonthlyAssignments(),
        [AddDate(d("2024-10-01")), AddDate(d("2024-10-02")), SetMeal(d("2024-10-02"), 5)],
    )

    assert len(state.entries) == 2
    assert [a.meal_date for a in state.to_submission()] == [d("2024-10-02")]


def test_adding_existing_date_keeps_one_entry():
    state = apply_all(
        MonthlyAssignments(),
        [AddDate(d("2024-10-04")), SetMeal(d("2024-10-04"), 3), AddDate(d("2024-10-04"))],
    )

    assert state.entries == (DateAssignment(meal_date=d("2024-10-04"), meal_id=3),)


def test_set_meal_replaces_previous_meal():
    state = apply_all(
        MonthlyAssignments(),
        [AddDate(d("2024-10-04")), SetMeal(d("2024-10-04"), 3), SetMeal(d("2024-10-04"), 8)],
    )

    assert state.get(d("2024-10-04")).meal_id == 8


def test_set_meal_on_unselected_date_is_rejected():
    with pytest.raises(ServiceValidationError) as exc:
        apply(MonthlyAssignments(), SetMeal(d("2024-10-09"), 2))

    assert exc.value.code == "DATE_NOT_SELECTED"


def test_remove_date():
    state = apply_all(
        MonthlyAssignments(),
        [AddDate(d("2024-10-01")), AddDate(d("2024-10-02")), RemoveDate(d("2024-10-01"))],
    )

    assert d("2024-10-01") not in state
    assert d("2024-10-02") in state

    # removing an absent date changes nothing
    assert apply(state, RemoveDate(d("2024-10-20"))).entries == state.entries


def test_submission_keeps_insertion_order():
    ops = []
    for day, meal in (("2024-10-15", 1), ("2024-10-02", 2), ("2024-10-09", 3)):
        ops += [AddDate(d(day)), SetMeal(d(day), meal)]

    state = apply_all(MonthlyAssignments(), ops)

    assert [a.meal_id for a in state.to_submission()] == [1, 2, 3]


def test_assignments_from_entries_sorted_by_date():
    entries = [
        SimpleNamespace(meal_date=d("2024-10-10"), meal_id=4),
        SimpleNamespace(meal_date=d("2024-10-03"), meal_id=2),
        SimpleNamespace(meal_date=None, meal_id=9),
    ]

    state = assignments_from_entries(entries)

    assert [(a.meal_date, a.meal_id) for a in state.entries] == [
        (d("2024-10-03"), 2),
        (d("2024-10-10"), 4),
    ]
