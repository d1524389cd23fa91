"""
Monthly date assignor.

Holds at most one meal per calendar date. Dates are added first with no meal
and filled in later, so only completed entries are submitted. Range checks
against the owning plan are the plan builder's job, not this module's.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from app.exceptions import ServiceValidationError


@dataclass(frozen=True)
class DateAssignment:
    meal_date: date
    meal_id: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.meal_id)


@dataclass(frozen=True)
class MonthlyAssignments:
    entries: Tuple[DateAssignment, ...] = ()

    def get(self, meal_date: date) -> Optional[DateAssignment]:
        for entry in self.entries:
            if entry.meal_date == meal_date:
                return entry
        return None

    def __contains__(self, meal_date: date) -> bool:
        return self.get(meal_date) is not None

    def to_submission(self) -> List[DateAssignment]:
        """Assignments with a meal set, in the order the dates were added."""
        return [entry for entry in self.entries if entry.is_complete]


@dataclass(frozen=True)
class AddDate:
    meal_date: date


@dataclass(frozen=True)
class RemoveDate:
    meal_date: date


@dataclass(frozen=True)
class SetMeal:
    meal_date: date
    meal_id: int


def _add_date(state: MonthlyAssignments, op: AddDate) -> MonthlyAssignments:
    if op.meal_date in state:
        return state
    return MonthlyAssignments(entries=state.entries + (DateAssignment(meal_date=op.meal_date),))


def _remove_date(state: MonthlyAssignments, op: RemoveDate) -> MonthlyAssignments:
    return MonthlyAssignments(
        entries=tuple(e for e in state.entries if e.meal_date != op.meal_date)
    )


def _set_meal(state: MonthlyAssignments, op: SetMeal) -> MonthlyAssignments:
    if op.meal_date not in state:
        raise ServiceValidationError(
            f"No date entry for {op.meal_date.isoformat()}; add the date first",
            details={"meal_date": op.meal_date.isoformat()},
            code="DATE_NOT_SELECTED",
        )
    return MonthlyAssignments(
        entries=tuple(
            replace(e, meal_id=op.meal_id) if e.meal_date == op.meal_date else e
            for e in state.entries
        )
    )


_TRANSITIONS: Dict[type, Callable[[MonthlyAssignments, Any], MonthlyAssignments]] = {
    AddDate: _add_date,
    RemoveDate: _remove_date,
    SetMeal: _set_meal,
}


def apply(state: MonthlyAssignments, operation: Any) -> MonthlyAssignments:
    handler = _TRANSITIONS.get(type(operation))
    if handler is None:
        raise ServiceValidationError(
            f"Unsupported monthly assignment operation {type(operation).__name__}",
            code="UNSUPPORTED_OPERATION",
        )
    return handler(state, operation)


def apply_all(state: MonthlyAssignments, operations: Iterable[Any]) -> MonthlyAssignments:
    for operation in operations:
        state = apply(state, operation)
    return state


def assignments_from_entries(entries: Iterable[Any]) -> MonthlyAssignments:
    """Rebuild editable assignments from persisted monthly plan entries."""
    dated = sorted(
        (e for e in entries if e.meal_date is not None), key=lambda e: e.meal_date
    )
    return MonthlyAssignments(
        entries=tuple(DateAssignment(meal_date=e.meal_date, meal_id=e.meal_id) for e in dated)
    )
