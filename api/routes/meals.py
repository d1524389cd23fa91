"""Meal catalog routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from api.dependencies import get_db
from domain.enums import MealCategory
from domain.schemas import MealResponse
from services import CatalogService

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("schoolmeals.api.meals")


@router.get("", response_model=List[MealResponse])
def get_meals(
    school_id: Optional[int] = Query(None, description="Only meals offered to this school"),
    category: Optional[MealCategory] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    is_active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
):
    """List catalog meals, optionally filtered by school, category, name and status"""
    meals = CatalogService.get_meals(
        db,
        school_id=school_id,
        category=category.value if category else None,
        search=search,
        is_active=is_active,
    )
    return [MealResponse.model_validate(m) for m in meals]
