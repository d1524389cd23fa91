from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.enums import MealCategory, PlanStatus, PlanType
from domain.schemas.common import Price
from services.monthly_assignor import DateAssignment, MonthlyAssignments
from services.plan_builder import PlanMeta
from services.weekly_scheduler import WeeklySchedule, WeeklySlot


class WeeklySlotSchema(BaseModel):
    category: Optional[MealCategory] = None
    meal_id: Optional[int] = None
    order: Optional[int] = Field(None, ge=1)

    model_config = {"from_attributes": True}


class DateAssignmentSchema(BaseModel):
    meal_date: date
    meal_id: Optional[int] = None

    model_config = {"from_attributes": True}


def schedule_from_schema(days: Dict[int, List[WeeklySlotSchema]]) -> WeeklySchedule:
    """Slots are taken in list order; client-sent ``order`` values are renumbered."""
    schedule = WeeklySchedule()
    for day, slots in sorted(days.items()):
        schedule = schedule.with_day(
            day,
            (
                WeeklySlot(
                    category=s.category.value if s.category else None,
                    meal_id=s.meal_id,
                )
                for s in slots
            ),
        )
    return schedule


def schedule_to_schema(schedule: WeeklySchedule) -> Dict[int, List[WeeklySlotSchema]]:
    return {
        day: [WeeklySlotSchema.model_validate(s) for s in slots]
        for day, slots in sorted(schedule.days.items())
    }


def assignments_from_schema(entries: List[DateAssignmentSchema]) -> MonthlyAssignments:
    seen = set()
    result = []
    for entry in entries:
        if entry.meal_date in seen:
            continue
        seen.add(entry.meal_date)
        result.append(DateAssignment(meal_date=entry.meal_date, meal_id=entry.meal_id or None))
    return MonthlyAssignments(entries=tuple(result))


def assignments_to_schema(state: MonthlyAssignments) -> List[DateAssignmentSchema]:
    return [DateAssignmentSchema.model_validate(e) for e in state.entries]


class MealPlanDraft(BaseModel):
    """Create/update payload: plan header plus the edited weekly slots or dates"""

    school_id: Optional[int] = None
    start_date: date
    end_date: date
    plan_type: PlanType = PlanType.WEEKLY
    is_active: PlanStatus = PlanStatus.ACTIVE
    weekly_slots: Dict[int, List[WeeklySlotSchema]] = Field(
        default_factory=dict, description="day_of_week (1=Sunday..5=Thursday) -> slots"
    )
    date_assignments: List[DateAssignmentSchema] = Field(default_factory=list)

    @field_validator("is_active", mode="before")
    @classmethod
    def normalize_status(cls, v: Union[str, bool]):
        """Accept both the console's 'active'/'inactive' and plain booleans"""
        if isinstance(v, bool):
            return PlanStatus.ACTIVE if v else PlanStatus.INACTIVE
        return v

    @model_validator(mode="after")
    def check_period(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def meta(self) -> PlanMeta:
        return PlanMeta(
            school_id=self.school_id,
            start_date=self.start_date,
            end_date=self.end_date,
            plan_type=self.plan_type,
            status=self.is_active,
        )

    def draft(self) -> Union[WeeklySchedule, MonthlyAssignments]:
        if self.plan_type is PlanType.WEEKLY:
            return schedule_from_schema(self.weekly_slots)
        return assignments_from_schema(self.date_assignments)


class MealPlanEntryResponse(BaseModel):
    meal_id: int
    day_of_week: Optional[int] = None
    meal_date: Optional[date] = None
    category: Optional[MealCategory] = None
    price: Price
    base_price: Price
    school_price: Optional[Price] = None
    order: Optional[int] = None

    model_config = {"from_attributes": True}


class MealPlanResponse(BaseModel):
    plan_id: int
    school_id: int
    start_date: date
    end_date: date
    plan_type: PlanType
    status: PlanStatus
    is_active: bool
    meals: List[MealPlanEntryResponse]
    requires_date_assignment: bool = False

    model_config = {"from_attributes": True}


class MealPlanPreviewResponse(BaseModel):
    school_id: int
    plan_type: PlanType
    meals: List[MealPlanEntryResponse]
    requires_date_assignment: bool = False


class MealPlanScheduleResponse(BaseModel):
    """Editable state of a saved plan, in the shape the /schedule endpoints take"""

    plan_id: int
    plan_type: PlanType
    weekly_slots: Dict[int, List[WeeklySlotSchema]] = Field(default_factory=dict)
    date_assignments: List[DateAssignmentSchema] = Field(default_factory=list)


class MealDateAssignment(BaseModel):
    meal_id: int = Field(..., gt=0)
    meal_date: date


class AssignMealsToDatesRequest(BaseModel):
    meal_assignments: List[MealDateAssignment] = Field(..., min_length=1)
