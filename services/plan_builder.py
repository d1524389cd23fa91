"""
Plan builder: turns an edited weekly schedule or monthly date assignments into
the resolved entries that get persisted for a meal plan.

Incomplete weekly slots are in-progress edits and are silently dropped; every
other problem (missing school, unknown meal, meal from another category, date
outside the plan, nothing left to save) is reported as ``PlanBuildError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from app.exceptions import PlanBuildError
from domain.enums import PlanStatus, PlanType
from services.monthly_assignor import MonthlyAssignments
from services.price_resolver import resolve
from services.weekly_scheduler import WeeklySchedule

logger = logging.getLogger("schoolmeals.scheduling.builder")


@dataclass(frozen=True)
class PlanMeta:
    school_id: Optional[int]
    start_date: date
    end_date: date
    plan_type: PlanType = PlanType.WEEKLY
    status: PlanStatus = PlanStatus.ACTIVE


@dataclass(frozen=True)
class ResolvedMealPlanEntry:
    meal_id: int
    price: Decimal
    base_price: Decimal
    school_price: Optional[Decimal] = None
    category: Optional[str] = None
    day_of_week: Optional[int] = None
    meal_date: Optional[date] = None
    order: Optional[int] = None


def requires_date_assignment(meta: PlanMeta) -> bool:
    """Monthly plans get a follow-up date-assignment step once the plan id is known."""
    return PlanType(meta.plan_type) is PlanType.MONTHLY


def check_date_in_range(meta: PlanMeta, meal_date: date) -> None:
    if not meta.start_date <= meal_date <= meta.end_date:
        raise PlanBuildError(
            f"{meal_date.isoformat()} is outside the plan period "
            f"{meta.start_date.isoformat()}..{meta.end_date.isoformat()}",
            details={
                "meal_date": meal_date.isoformat(),
                "start_date": meta.start_date.isoformat(),
                "end_date": meta.end_date.isoformat(),
            },
            code="DATE_OUT_OF_RANGE",
        )


def _check_meta(meta: PlanMeta) -> None:
    if not meta.school_id:
        raise PlanBuildError("A school is required to build a meal plan", code="SCHOOL_REQUIRED")
    if meta.end_date < meta.start_date:
        raise PlanBuildError(
            "end_date must not be before start_date",
            details={"start_date": meta.start_date.isoformat(), "end_date": meta.end_date.isoformat()},
            code="INVALID_DATE_RANGE",
        )


def _build_weekly(schedule: WeeklySchedule, catalog: Dict[int, Any], overrides: List[Any]) -> List[ResolvedMealPlanEntry]:
    entries: List[ResolvedMealPlanEntry] = []
    unknown: List[int] = []
    mismatched: List[Dict[str, Any]] = []
    dropped = 0

    for day, slot in schedule.iter_slots():
        if not slot.is_complete:
            dropped += 1
            continue
        meal = catalog.get(slot.meal_id)
        if meal is None:
            unknown.append(slot.meal_id)
            continue
        if meal.category != slot.category:
            mismatched.append(
                {"day_of_week": day, "meal_id": slot.meal_id, "slot_category": slot.category, "meal_category": meal.category}
            )
            continue
        price = resolve(meal, overrides)
        entries.append(
            ResolvedMealPlanEntry(
                meal_id=meal.meal_id,
                day_of_week=day,
                category=slot.category,
                price=price.price,
                base_price=price.base_price,
                school_price=price.school_price,
                order=slot.order,
            )
        )

    if dropped:
        logger.debug("Dropped %d incomplete weekly slots", dropped)
    if unknown:
        raise PlanBuildError(
            "Meals are not available for this school",
            details={"meal_ids": sorted(set(unknown))},
            code="UNKNOWN_MEAL",
        )
    if mismatched:
        raise PlanBuildError(
            "Meals do not belong to the selected category",
            details={"slots": mismatched},
            code="CATEGORY_MISMATCH",
        )
    return entries


def _build_monthly(meta: PlanMeta, assignments: MonthlyAssignments, catalog: Dict[int, Any], overrides: List[Any]) -> List[ResolvedMealPlanEntry]:
    entries: List[ResolvedMealPlanEntry] = []
    unknown: List[int] = []

    for assignment in assignments.to_submission():
        check_date_in_range(meta, assignment.meal_date)
        meal = catalog.get(assignment.meal_id)
        if meal is None:
            unknown.append(assignment.meal_id)
            continue
        price = resolve(meal, overrides)
        entries.append(
            ResolvedMealPlanEntry(
                meal_id=meal.meal_id,
                meal_date=assignment.meal_date,
                category=meal.category,
                price=price.price,
                base_price=price.base_price,
                school_price=price.school_price,
            )
        )

    if unknown:
        raise PlanBuildError(
            "Meals are not available for this school",
            details={"meal_ids": sorted(set(unknown))},
            code="UNKNOWN_MEAL",
        )
    return entries


def build_date_entries(
    meta: PlanMeta,
    assignments: MonthlyAssignments,
    catalog: Iterable[Any],
    overrides: Iterable[Any],
) -> List[ResolvedMealPlanEntry]:
    """Resolve completed date assignments for an existing monthly plan."""
    _check_meta(meta)
    entries = _build_monthly(meta, assignments, {m.meal_id: m for m in catalog}, list(overrides))
    if not entries:
        raise PlanBuildError("Assign at least one meal to a date", code="NO_MEALS")
    return entries


def build(
    meta: PlanMeta,
    draft: Union[WeeklySchedule, MonthlyAssignments],
    catalog: Iterable[Any],
    overrides: Iterable[Any],
) -> List[ResolvedMealPlanEntry]:
    """
    Build the resolved entries of a plan.

    Args:
        meta: plan header (school, period, type, status)
        draft: ``WeeklySchedule`` for weekly plans, ``MonthlyAssignments`` for monthly ones
        catalog: meals available to the plan's school
        overrides: the school's price overrides

    Returns:
        Entries in day order (weekly) or date-insertion order (monthly)

    Raises:
        PlanBuildError: missing school, invalid draft, or no complete entries
    """
    _check_meta(meta)
    plan_type = PlanType(meta.plan_type)
    catalog_by_id = {m.meal_id: m for m in catalog}
    overrides = list(overrides)

    if plan_type is PlanType.WEEKLY:
        if not isinstance(draft, WeeklySchedule):
            raise PlanBuildError("Weekly plans are built from weekly slots", code="INVALID_DRAFT")
        entries = _build_weekly(draft, catalog_by_id, overrides)
    else:
        if not isinstance(draft, MonthlyAssignments):
            raise PlanBuildError("Monthly plans are built from date assignments", code="INVALID_DRAFT")
        entries = _build_monthly(meta, draft, catalog_by_id, overrides)

    if not entries:
        raise PlanBuildError(
            "A meal plan needs at least one complete meal assignment",
            code="NO_MEALS",
        )

    logger.info(
        "Built %s plan for school %s with %d entries", plan_type.value, meta.school_id, len(entries)
    )
    return entries
