from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from api.dependencies import get_db, get_request_context
from app.context import RequestContext
from domain.enums import PlanType
from domain.models import MealPlan
from domain.schemas import (
    AssignMealsToDatesRequest,
    MealPlanDraft,
    MealPlanEntryResponse,
    MealPlanPreviewResponse,
    MealPlanResponse,
    MealPlanScheduleResponse,
)
from domain.schemas.plan_schemas import assignments_to_schema, schedule_to_schema
from services import MealPlanService
from services.monthly_assignor import MonthlyAssignments
from services.plan_builder import requires_date_assignment

router = APIRouter(prefix="/meal-plans", tags=["Meal Planning"])
logger = logging.getLogger("schoolmeals.api.plans")


def _plan_response(plan: MealPlan) -> MealPlanResponse:
    response = MealPlanResponse.model_validate(plan)
    response.requires_date_assignment = MealPlanService.requires_date_assignment(plan)
    return response


@router.post("/preview", response_model=MealPlanPreviewResponse)
def preview_meal_plan(body: MealPlanDraft, db: Session = Depends(get_db)):
    """
    Build a plan draft without saving it.

    Incomplete weekly slots (no category or no meal) are left out; every
    remaining meal is priced for the plan's school.
    """
    meta = body.meta()
    entries = MealPlanService.preview(db, meta, body.draft())
    return MealPlanPreviewResponse(
        school_id=meta.school_id,
        plan_type=meta.plan_type,
        meals=[MealPlanEntryResponse.model_validate(e) for e in entries],
        requires_date_assignment=requires_date_assignment(meta),
    )


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
def create_meal_plan(
    body: MealPlanDraft,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Create a meal plan for a school.

    Weekly plans take ``weekly_slots`` (day 1=Sunday .. 5=Thursday), monthly
    plans take ``date_assignments``. For monthly plans the response sets
    ``requires_date_assignment`` so the client can continue with
    POST /meal-plans/{plan_id}/dates.
    """
    logger.info(
        "Creating %s plan for school %s: %s..%s",
        body.plan_type.value,
        body.school_id,
        body.start_date,
        body.end_date,
    )
    plan = MealPlanService.create_plan(db, body.meta(), body.draft(), ctx=ctx)
    return _plan_response(plan)


@router.get("", response_model=List[MealPlanResponse])
def list_meal_plans(
    school_id: Optional[int] = Query(None, description="Only plans of this school"),
    db: Session = Depends(get_db),
):
    """List meal plans, most recent period first"""
    return [_plan_response(p) for p in MealPlanService.list_plans(db, school_id)]


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_meal_plan(plan_id: int, db: Session = Depends(get_db)):
    """Get a meal plan with its resolved meals"""
    return _plan_response(MealPlanService.get_plan(db, plan_id))


@router.get("/{plan_id}/schedule", response_model=MealPlanScheduleResponse)
def get_meal_plan_schedule(plan_id: int, db: Session = Depends(get_db)):
    """
    Load a saved plan back into editable form.

    Weekly plans come back as ``weekly_slots``, monthly plans as
    ``date_assignments``; either can be sent to /schedule/*/apply and then
    to PUT /meal-plans/{plan_id}.
    """
    draft = MealPlanService.editable_draft(db, plan_id)
    if isinstance(draft, MonthlyAssignments):
        return MealPlanScheduleResponse(
            plan_id=plan_id,
            plan_type=PlanType.MONTHLY,
            date_assignments=assignments_to_schema(draft),
        )
    return MealPlanScheduleResponse(
        plan_id=plan_id,
        plan_type=PlanType.WEEKLY,
        weekly_slots=schedule_to_schema(draft),
    )


@router.put("/{plan_id}", response_model=MealPlanResponse)
def update_meal_plan(
    plan_id: int,
    body: MealPlanDraft,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Replace a plan's header and meals"""
    plan = MealPlanService.update_plan(db, plan_id, body.meta(), body.draft(), ctx=ctx)
    return _plan_response(plan)


@router.post("/{plan_id}/dates", response_model=MealPlanResponse)
def assign_meals_to_dates(
    plan_id: int,
    body: AssignMealsToDatesRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Assign meals to specific dates of a monthly plan"""
    plan = MealPlanService.assign_dates(
        db,
        plan_id,
        [(a.meal_id, a.meal_date) for a in body.meal_assignments],
        ctx=ctx,
    )
    return _plan_response(plan)


@router.delete("/{plan_id}")
def delete_meal_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Delete a meal plan and its meals"""
    MealPlanService.delete_plan(db, plan_id, ctx=ctx)
    return {"status": "ok", "removed": plan_id}
