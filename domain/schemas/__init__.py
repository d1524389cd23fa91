"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.pricing_schemas import (
    MealResponse,
    SchoolMealPriceResponse,
    SchoolMealPricesResponse,
    SchoolMealPriceUpdate,
    PriceTableRow,
    PriceTableResponse,
    ResolvedPriceResponse,
    BulkPriceUpdateRequest,
    BulkPriceUpdateResponse,
    PriceUpsertItem,
)
from domain.schemas.plan_schemas import (
    WeeklySlotSchema,
    DateAssignmentSchema,
    MealPlanDraft,
    MealPlanEntryResponse,
    MealPlanResponse,
    MealPlanPreviewResponse,
    MealPlanScheduleResponse,
    MealDateAssignment,
    AssignMealsToDatesRequest,
)
from domain.schemas.schedule_schemas import (
    WeeklyApplyRequest,
    WeeklyApplyResponse,
    MonthlyApplyRequest,
    MonthlyApplyResponse,
)

__all__ = [
    "MealResponse",
    "SchoolMealPriceResponse",
    "SchoolMealPricesResponse",
    "SchoolMealPriceUpdate",
    "PriceTableRow",
    "PriceTableResponse",
    "ResolvedPriceResponse",
    "BulkPriceUpdateRequest",
    "BulkPriceUpdateResponse",
    "PriceUpsertItem",
    "WeeklySlotSchema",
    "DateAssignmentSchema",
    "MealPlanDraft",
    "MealPlanEntryResponse",
    "MealPlanResponse",
    "MealPlanPreviewResponse",
    "MealPlanScheduleResponse",
    "MealDateAssignment",
    "AssignMealsToDatesRequest",
    "WeeklyApplyRequest",
    "WeeklyApplyResponse",
    "MonthlyApplyRequest",
    "MonthlyApplyResponse",
]
