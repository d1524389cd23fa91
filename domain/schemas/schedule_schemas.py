"""
Wire format of the stateless editing endpoints: the client sends its current
weekly schedule (or monthly assignments) with a list of operations and gets the
resulting state back.
"""

from datetime import date
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from domain.enums import MealCategory
from domain.schemas.plan_schemas import DateAssignmentSchema, WeeklySlotSchema
from services import monthly_assignor, weekly_scheduler


class AddSlotOp(BaseModel):
    op: Literal["add_slot"]
    day: int

    def to_operation(self):
        return weekly_scheduler.AddSlot(day=self.day)


class RemoveSlotOp(BaseModel):
    op: Literal["remove_slot"]
    day: int
    index: int

    def to_operation(self):
        return weekly_scheduler.RemoveSlot(day=self.day, index=self.index)


class UpdateSlotOp(BaseModel):
    op: Literal["update_slot"]
    day: int
    index: int
    category: Optional[MealCategory] = None
    meal_id: Optional[int] = None

    def to_operation(self):
        return weekly_scheduler.UpdateSlot(
            day=self.day,
            index=self.index,
            category=self.category.value if self.category else None,
            meal_id=self.meal_id,
        )


class MoveUpOp(BaseModel):
    op: Literal["move_up"]
    day: int
    index: int

    def to_operation(self):
        return weekly_scheduler.MoveUp(day=self.day, index=self.index)


class MoveDownOp(BaseModel):
    op: Literal["move_down"]
    day: int
    index: int

    def to_operation(self):
        return weekly_scheduler.MoveDown(day=self.day, index=self.index)


class DuplicateToNextDayOp(BaseModel):
    op: Literal["duplicate_to_next_day"]
    day: int
    index: int

    def to_operation(self):
        return weekly_scheduler.DuplicateToNextDay(day=self.day, index=self.index)


class ReorderByDragOp(BaseModel):
    op: Literal["reorder_by_drag"]
    source_day: int
    source_index: int
    target_day: int
    target_index: int

    def to_operation(self):
        return weekly_scheduler.ReorderByDrag(
            source_day=self.source_day,
            source_index=self.source_index,
            target_day=self.target_day,
            target_index=self.target_index,
        )


class ClearDayOp(BaseModel):
    op: Literal["clear_day"]
    day: int

    def to_operation(self):
        return weekly_scheduler.ClearDay(day=self.day)


WeeklyOperation = Annotated[
    Union[
        AddSlotOp,
        RemoveSlotOp,
        UpdateSlotOp,
        MoveUpOp,
        MoveDownOp,
        DuplicateToNextDayOp,
        ReorderByDragOp,
        ClearDayOp,
    ],
    Field(discriminator="op"),
]


class WeeklyApplyRequest(BaseModel):
    weekly_slots: Dict[int, List[WeeklySlotSchema]] = Field(default_factory=dict)
    operations: List[WeeklyOperation] = Field(..., min_length=1)


class WeeklyApplyResponse(BaseModel):
    weekly_slots: Dict[int, List[WeeklySlotSchema]]


class AddDateOp(BaseModel):
    op: Literal["add_date"]
    meal_date: date

    def to_operation(self):
        return monthly_assignor.AddDate(meal_date=self.meal_date)


class RemoveDateOp(BaseModel):
    op: Literal["remove_date"]
    meal_date: date

    def to_operation(self):
        return monthly_assignor.RemoveDate(meal_date=self.meal_date)


class SetMealOp(BaseModel):
    op: Literal["set_meal"]
    meal_date: date
    meal_id: int = Field(..., gt=0)

    def to_operation(self):
        return monthly_assignor.SetMeal(meal_date=self.meal_date, meal_id=self.meal_id)


MonthlyOperation = Annotated[
    Union[AddDateOp, RemoveDateOp, SetMealOp],
    Field(discriminator="op"),
]


class MonthlyApplyRequest(BaseModel):
    date_assignments: List[DateAssignmentSchema] = Field(default_factory=list)
    operations: List[MonthlyOperation] = Field(..., min_length=1)


class MonthlyApplyResponse(BaseModel):
    date_assignments: List[DateAssignmentSchema]
    submission: List[DateAssignmentSchema]
