"""Stateless editing of weekly slots and monthly date assignments"""

from fastapi import APIRouter
import logging

from domain.schemas import (
    MonthlyApplyRequest,
    MonthlyApplyResponse,
    WeeklyApplyRequest,
    WeeklyApplyResponse,
)
from domain.schemas.plan_schemas import (
    assignments_from_schema,
    assignments_to_schema,
    schedule_from_schema,
    schedule_to_schema,
)
from services import monthly_assignor, weekly_scheduler

router = APIRouter(prefix="/schedule", tags=["Schedule Editing"])
logger = logging.getLogger("schoolmeals.api.schedule")


@router.post("/weekly/apply", response_model=WeeklyApplyResponse)
def apply_weekly_operations(body: WeeklyApplyRequest):
    """
    Apply editing operations to a weekly schedule and return the new schedule.

    Operations run in order; if one is invalid (unknown day, slot index out of
    range) nothing is applied and the error is returned.
    """
    schedule = schedule_from_schema(body.weekly_slots)
    schedule = weekly_scheduler.apply_all(schedule, (op.to_operation() for op in body.operations))
    return WeeklyApplyResponse(weekly_slots=schedule_to_schema(schedule))


@router.post("/monthly/apply", response_model=MonthlyApplyResponse)
def apply_monthly_operations(body: MonthlyApplyRequest):
    """Apply date operations and return the assignments plus what would be submitted"""
    state = assignments_from_schema(body.date_assignments)
    state = monthly_assignor.apply_all(state, (op.to_operation() for op in body.operations))
    return MonthlyApplyResponse(
        date_assignments=assignments_to_schema(state),
        submission=[
            {"meal_date": a.meal_date, "meal_id": a.meal_id} for a in state.to_submission()
        ],
    )
