"""
Weekly slot scheduler.

A weekly plan repeats the same ordered list of meal slots for every school day
(1=Sunday .. 5=Thursday). Editing is modelled as pure state transitions:
``apply(schedule, operation)`` never mutates ``schedule`` and returns a new
``WeeklySchedule``. After every operation the ``order`` of the slots of each
day is exactly 1..N in list order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from app.exceptions import ServiceValidationError
from domain.enums import DayOfWeek, MealCategory, SCHOOL_DAYS

logger = logging.getLogger("schoolmeals.scheduling.weekly")


@dataclass(frozen=True)
class WeeklySlot:
    category: Optional[str] = None
    meal_id: Optional[int] = None
    order: int = 1

    @property
    def is_complete(self) -> bool:
        return bool(self.category) and bool(self.meal_id)


@dataclass(frozen=True)
class WeeklySchedule:
    days: Mapping[int, Tuple[WeeklySlot, ...]] = field(default_factory=dict)

    def slots(self, day: int) -> Tuple[WeeklySlot, ...]:
        return tuple(self.days.get(int(day), ()))

    def with_day(self, day: int, slots: Iterable[WeeklySlot]) -> "WeeklySchedule":
        days = {d: tuple(s) for d, s in self.days.items()}
        days[_school_day(day).value] = _renumber(slots)
        return WeeklySchedule(days=days)

    def iter_slots(self):
        """Yield ``(day, slot)`` for every slot, days in school-week order."""
        for day in SCHOOL_DAYS:
            for slot in self.slots(day):
                yield day.value, slot

    def is_empty(self) -> bool:
        return not any(self.days.values())


# --------------------------------------------------------------------------
# Operations
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class AddSlot:
    day: int


@dataclass(frozen=True)
class RemoveSlot:
    day: int
    index: int


@dataclass(frozen=True)
class UpdateSlot:
    day: int
    index: int
    category: Optional[str] = None
    meal_id: Optional[int] = None


@dataclass(frozen=True)
class MoveUp:
    day: int
    index: int


@dataclass(frozen=True)
class MoveDown:
    day: int
    index: int


@dataclass(frozen=True)
class DuplicateToNextDay:
    day: int
    index: int


@dataclass(frozen=True)
class ReorderByDrag:
    source_day: int
    source_index: int
    target_day: int
    target_index: int


@dataclass(frozen=True)
class ClearDay:
    day: int


# --------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------


def _renumber(slots: Iterable[WeeklySlot]) -> Tuple[WeeklySlot, ...]:
    return tuple(replace(slot, order=i) for i, slot in enumerate(slots, start=1))


def _school_day(day: Any) -> DayOfWeek:
    try:
        return DayOfWeek(int(day))
    except (TypeError, ValueError):
        raise ServiceValidationError(
            f"Invalid day_of_week {day!r}; expected 1 (Sunday) to 5 (Thursday)",
            details={"day_of_week": day},
            code="INVALID_DAY",
        )


def _slot_index(slots: Tuple[WeeklySlot, ...], day: DayOfWeek, index: int) -> int:
    if not 0 <= index < len(slots):
        raise ServiceValidationError(
            f"No slot at index {index} for day {day.value}",
            details={"day_of_week": day.value, "index": index, "slots": len(slots)},
            code="SLOT_INDEX_OUT_OF_RANGE",
        )
    return index


def _category(value: str) -> str:
    try:
        return MealCategory(value).value
    except ValueError:
        raise ServiceValidationError(
            f"Unknown meal category {value!r}",
            details={"category": value, "allowed": [c.value for c in MealCategory]},
            code="INVALID_CATEGORY",
        )


# --------------------------------------------------------------------------
# Transitions
# --------------------------------------------------------------------------


def _add_slot(schedule: WeeklySchedule, op: AddSlot) -> WeeklySchedule:
    day = _school_day(op.day)
    slots = schedule.slots(day)
    return schedule.with_day(day, slots + (WeeklySlot(order=len(slots) + 1),))


def _remove_slot(schedule: WeeklySchedule, op: RemoveSlot) -> WeeklySchedule:
    day = _school_day(op.day)
    slots = schedule.slots(day)
    idx = _slot_index(slots, day, op.index)
    return schedule.with_day(day, slots[:idx] + slots[idx + 1:])


def _update_slot(schedule: WeeklySchedule, op: UpdateSlot) -> WeeklySchedule:
    day = _school_day(op.day)
    slots = list(schedule.slots(day))
    idx = _slot_index(tuple(slots), day, op.index)
    current = slots[idx]

    category = current.category
    meal_id = current.meal_id
    if op.category is not None:
        category = _category(op.category)
        # a meal belongs to exactly one category
        if category != current.category:
            meal_id = None
    if op.meal_id is not None:
        meal_id = op.meal_id

    slots[idx] = replace(current, category=category, meal_id=meal_id)
    return schedule.with_day(day, slots)


def _move_up(schedule: WeeklySchedule, op: MoveUp) -> WeeklySchedule:
    day = _school_day(op.day)
    slots = list(schedule.slots(day))
    idx = _slot_index(tuple(slots), day, op.index)
    if idx == 0:
        return schedule
    slots[idx - 1], slots[idx] = slots[idx], slots[idx - 1]
    return schedule.with_day(day, slots)


def _move_down(schedule: WeeklySchedule, op: MoveDown) -> WeeklySchedule:
    day = _school_day(op.day)
    slots = list(schedule.slots(day))
    idx = _slot_index(tuple(slots), day, op.index)
    if idx == len(slots) - 1:
        return schedule
    slots[idx], slots[idx + 1] = slots[idx + 1], slots[idx]
    return schedule.with_day(day, slots)


def _duplicate_to_next_day(schedule: WeeklySchedule, op: DuplicateToNextDay) -> WeeklySchedule:
    day = _school_day(op.day)
    source = schedule.slots(day)
    idx = _slot_index(source, day, op.index)
    target_day = day.next_school_day()
    target = schedule.slots(target_day)
    copy = WeeklySlot(
        category=source[idx].category,
        meal_id=source[idx].meal_id,
        order=len(target) + 1,
    )
    return schedule.with_day(target_day, target + (copy,))


def _reorder_by_drag(schedule: WeeklySchedule, op: ReorderByDrag) -> WeeklySchedule:
    source_day = _school_day(op.source_day)
    target_day = _school_day(op.target_day)
    if source_day == target_day and op.source_index == op.target_index:
        return schedule

    source = list(schedule.slots(source_day))
    idx = _slot_index(tuple(source), source_day, op.source_index)
    if op.target_index < 0:
        raise ServiceValidationError(
            f"Invalid drop index {op.target_index}",
            details={"day_of_week": target_day.value, "index": op.target_index},
            code="SLOT_INDEX_OUT_OF_RANGE",
        )

    moved = source.pop(idx)
    if source_day == target_day:
        source.insert(min(op.target_index, len(source)), moved)
        return schedule.with_day(source_day, source)

    target = list(schedule.slots(target_day))
    target.insert(min(op.target_index, len(target)), moved)
    return schedule.with_day(source_day, source).with_day(target_day, target)


def _clear_day(schedule: WeeklySchedule, op: ClearDay) -> WeeklySchedule:
    day = _school_day(op.day)
    return schedule.with_day(day, ())


_TRANSITIONS: Dict[type, Callable[[WeeklySchedule, Any], WeeklySchedule]] = {
    AddSlot: _add_slot,
    RemoveSlot: _remove_slot,
    UpdateSlot: _update_slot,
    MoveUp: _move_up,
    MoveDown: _move_down,
    DuplicateToNextDay: _duplicate_to_next_day,
    ReorderByDrag: _reorder_by_drag,
    ClearDay: _clear_day,
}


def apply(schedule: WeeklySchedule, operation: Any) -> WeeklySchedule:
    """Apply one editing operation and return the resulting schedule."""
    handler = _TRANSITIONS.get(type(operation))
    if handler is None:
        raise ServiceValidationError(
            f"Unsupported weekly schedule operation {type(operation).__name__}",
            code="UNSUPPORTED_OPERATION",
        )
    logger.debug("Applying %s", operation)
    return handler(schedule, operation)


def apply_all(schedule: WeeklySchedule, operations: Iterable[Any]) -> WeeklySchedule:
    """Apply operations in the order given; the first failure aborts the batch."""
    for operation in operations:
        schedule = apply(schedule, operation)
    return schedule


def schedule_from_entries(entries: Iterable[Any]) -> WeeklySchedule:
    """Rebuild an editable schedule from persisted weekly plan entries."""
    by_day: Dict[int, list] = {}
    for entry in entries:
        if entry.day_of_week is None:
            continue
        by_day.setdefault(int(entry.day_of_week), []).append(entry)

    days = {}
    for day, day_entries in by_day.items():
        day_entries.sort(key=lambda e: (e.order if e.order is not None else 0))
        days[day] = _renumber(
            WeeklySlot(category=e.category, meal_id=e.meal_id) for e in day_entries
        )
    return WeeklySchedule(days=days)
