"""
Tests for the weekly slot scheduler state transitions.
"""

import random
from types import SimpleNamespace

import pytest

from app.exceptions import ServiceValidationError
from services.weekly_scheduler import (
    AddSlot,
    ClearDay,
    DuplicateToNextDay,
    MoveDown,
    MoveUp,
    RemoveSlot,
    ReorderByDrag,
    UpdateSlot,
    WeeklySchedule,
    WeeklySlot,
    apply,
    apply_all,
    schedule_from_entries,
)


def _schedule(**days):
    """_schedule(d1=[("hot_meal", 1), ...]) -> WeeklySchedule"""
    schedule = WeeklySchedule()
    for key, slots in days.items():
        schedule = schedule.with_day(
            int(key[1:]), [WeeklySlot(category=c, meal_id=m) for c, m in slots]
        )
    return schedule


def _view(schedule, day):
    return [(s.category, s.meal_id, s.order) for s in schedule.slots(day)]


def _assert_dense(schedule):
    for day in range(1, 6):
        assert [s.order for s in schedule.slots(day)] == list(range(1, len(schedule.slots(day)) + 1))


# =============================================================================
# ADD / REMOVE / UPDATE
# =============================================================================


def test_add_slot_appends_empty_slot():
    schedule = apply(WeeklySchedule(), AddSlot(day=1))
    schedule = apply(schedule, AddSlot(day=1))

    assert _view(schedule, 1) == [(None, None, 1), (None, None, 2)]


def test_apply_does_not_mutate_input():
    original = _schedule(d1=[("hot_meal", 1)])

    apply(original, AddSlot(day=1))

    assert _view(original, 1) == [("hot_meal", 1, 1)]


def test_remove_slot_renumbers_remaining():
    schedule = _schedule(d2=[("hot_meal", 1), ("sandwich", 2), ("burger", 3)])

    schedule = apply(schedule, RemoveSlot(day=2, index=0))

    assert _view(schedule, 2) == [("sandwich", 2, 1), ("burger", 3, 2)]


def test_remove_slot_out_of_range_fails_fast():
    schedule = _schedule(d1=[("hot_meal", 1)])

    with pytest.raises(ServiceValidationError) as exc:
        apply(schedule, RemoveSlot(day=1, index=3))
    assert exc.value.code == "SLOT_INDEX_OUT_OF_RANGE"


def test_update_slot_keeps_order():
    schedule = _schedule(d1=[("hot_meal", 1), (None, None)])

    schedule = apply(schedule, UpdateSlot(day=1, index=1, category="sandwich", meal_id=5))

    assert _view(schedule, 1) == [("hot_meal", 1, 1), ("sandwich", 5, 2)]


def test_changing_category_clears_meal():
    schedule = _schedule(d1=[("hot_meal", 1)])

    schedule = apply(schedule, UpdateSlot(day=1, index=0, category="crepe"))

    assert _view(schedule, 1) == [("crepe", None, 1)]


def test_same_category_keeps_meal():
    schedule = _schedule(d1=[("hot_meal", 1)])

    schedule = apply(schedule, UpdateSlot(day=1, index=0, category="hot_meal"))

    assert _view(schedule, 1) == [("hot_meal", 1, 1)]


def test_update_with_unknown_category_is_rejected():
    schedule = _schedule(d1=[(None, None)])

    with pytest.raises(ServiceValidationError) as exc:
        apply(schedule, UpdateSlot(day=1, index=0, category="pizza"))
    assert exc.value.code == "INVALID_CATEGORY"


@pytest.mark.parametrize("day", [0, 6, 7, "friday"])
def test_days_outside_school_week_are_rejected(day):
    with pytest.raises(ServiceValidationError) as exc:
        apply(WeeklySchedule(), AddSlot(day=day))
    assert exc.value.code == "INVALID_DAY"


# =============================================================================
# MOVE UP / MOVE DOWN
# =============================================================================


def test_move_down_swaps_with_next_slot():
    """Sunday [hot_meal M1, sandwich M2] -> moveDown(1, 0) -> [sandwich M2, hot_meal M1]"""
    schedule = _schedule(d1=[("hot_meal", 1), ("sandwich", 2)])

    schedule = apply(schedule, MoveDown(day=1, index=0))

    assert _view(schedule, 1) == [("sandwich", 2, 1), ("hot_meal", 1, 2)]


def test_move_up_swaps_with_previous_slot():
    schedule = _schedule(d3=[("hot_meal", 1), ("sandwich", 2), ("burger", 3)])

    schedule = apply(schedule, MoveUp(day=3, index=2))

    assert _view(schedule, 3) == [("hot_meal", 1, 1), ("burger", 3, 2), ("sandwich", 2, 3)]


def test_moves_at_boundaries_are_noops():
    schedule = _schedule(d1=[("hot_meal", 1), ("sandwich", 2)])

    assert apply(schedule, MoveUp(day=1, index=0)) == schedule
    assert apply(schedule, MoveDown(day=1, index=1)) == schedule


# =============================================================================
# DUPLICATE
# =============================================================================


@pytest.mark.parametrize("day,expected_target", [(1, 2), (2, 3), (3, 4), (4, 5), (5, 1)])
def test_duplicate_goes_to_next_school_day(day, expected_target):
    schedule = _schedule(**{f"d{day}": [("burger", 9)]})

    schedule = apply(schedule, DuplicateToNextDay(day=day, index=0))

    assert _view(schedule, expected_target)[-1] == ("burger", 9, len(schedule.slots(expected_target)))
    assert _view(schedule, day)[0] == ("burger", 9, 1)


def test_thursday_duplicate_appends_after_sunday_slots():
    schedule = _schedule(d1=[("hot_meal", 1), ("sandwich", 2)], d5=[("crepe", 7)])

    schedule = apply(schedule, DuplicateToNextDay(day=5, index=0))

    assert _view(schedule, 1) == [("hot_meal", 1, 1), ("sandwich", 2, 2), ("crepe", 7, 3)]
    assert _view(schedule, 5) == [("crepe", 7, 1)]


# =============================================================================
# DRAG AND DROP
# =============================================================================


def test_drag_across_days_renumbers_both_days():
    schedule = _schedule(
        d1=[("hot_meal", 1), ("sandwich", 2), ("burger", 3)],
        d2=[("crepe", 4), ("nursery", 5)],
    )

    schedule = apply(schedule, ReorderByDrag(source_day=1, source_index=1, target_day=2, target_index=1))

    assert _view(schedule, 1) == [("hot_meal", 1, 1), ("burger", 3, 2)]
    assert _view(schedule, 2) == [("crepe", 4, 1), ("sandwich", 2, 2), ("nursery", 5, 3)]


def test_drag_within_day_moves_slot():
    schedule = _schedule(d4=[("hot_meal", 1), ("sandwich", 2), ("burger", 3)])

    schedule = apply(schedule, ReorderByDrag(source_day=4, source_index=0, target_day=4, target_index=2))

    assert _view(schedule, 4) == [("sandwich", 2, 1), ("burger", 3, 2), ("hot_meal", 1, 3)]


def test_drag_to_same_place_is_noop():
    schedule = _schedule(d1=[("hot_meal", 1), ("sandwich", 2)])

    assert apply(schedule, ReorderByDrag(1, 1, 1, 1)) is schedule


def test_drag_onto_empty_day_past_the_end_appends():
    schedule = _schedule(d1=[("hot_meal", 1)])

    schedule = apply(schedule, ReorderByDrag(source_day=1, source_index=0, target_day=3, target_index=10))

    assert _view(schedule, 1) == []
    assert _view(schedule, 3) == [("hot_meal", 1, 1)]


# =============================================================================
# CLEAR DAY AND INVARIANTS
# =============================================================================


def test_clear_day_only_empties_that_day():
    schedule = _schedule(d1=[("hot_meal", 1)], d2=[("sandwich", 2)])

    schedule = apply(schedule, ClearDay(day=1))

    assert _view(schedule, 1) == []
    assert _view(schedule, 2) == [("sandwich", 2, 1)]


def test_failed_operation_in_batch_leaves_caller_state_intact():
    schedule = _schedule(d1=[("hot_meal", 1)])

    with pytest.raises(ServiceValidationError):
        apply_all(schedule, [AddSlot(day=1), RemoveSlot(day=2, index=0)])

    assert _view(schedule, 1) == [("hot_meal", 1, 1)]


def test_orders_stay_dense_after_random_edit_sequences():
    rng = random.Random(20241001)
    categories = ["hot_meal", "sandwich", "burger", "crepe"]
    schedule = WeeklySchedule()

    for _ in range(500):
        day = rng.randint(1, 5)
        size = len(schedule.slots(day))
        choice = rng.choice(["add", "remove", "update", "up", "down", "dup", "drag", "clear"])
        if choice == "add" or size == 0:
            op = AddSlot(day=day)
        elif choice == "remove":
            op = RemoveSlot(day=day, index=rng.randrange(size))
        elif choice == "update":
            op = UpdateSlot(day=day, index=rng.randrange(size), category=rng.choice(categories), meal_id=rng.randint(1, 9))
        elif choice == "up":
            op = MoveUp(day=day, index=rng.randrange(size))
        elif choice == "down":
            op = MoveDown(day=day, index=rng.randrange(size))
        elif choice == "dup":
            op = DuplicateToNextDay(day=day, index=rng.randrange(size))
        elif choice == "drag":
            op = ReorderByDrag(day, rng.randrange(size), rng.randint(1, 5), rng.randint(0, 6))
        else:
            op = ClearDay(day=day) if rng.random() < 0.1 else AddSlot(day=day)
        schedule = apply(schedule, op)
        _assert_dense(schedule)


def test_schedule_from_entries_orders_by_stored_order():
    entries = [
        SimpleNamespace(day_of_week=2, category="sandwich", meal_id=2, order=2),
        SimpleNamespace(day_of_week=2, category="hot_meal", meal_id=1, order=1),
        SimpleNamespace(day_of_week=None, category="crepe", meal_id=3, order=None),
    ]

    schedule = schedule_from_entries(entries)

    assert _view(schedule, 2) == [("hot_meal", 1, 1), ("sandwich", 2, 2)]
    assert list(schedule.iter_slots()) == [(2, schedule.slots(2)[0]), (2, schedule.slots(2)[1])]
