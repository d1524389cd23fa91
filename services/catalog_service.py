"""Meal catalog reads"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import MealCategory
from domain.models import Meal
from repositories import MealRepository

logger = logging.getLogger("schoolmeals.catalog")


class CatalogService:
    """Read access to the meal catalog."""

    @staticmethod
    def get_meals(
        db: Session,
        school_id: Optional[int] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> List[Meal]:
        """Meals offered to ``school_id`` (all meals when omitted), optionally by category."""
        if category is not None:
            try:
                category = MealCategory(category).value
            except ValueError:
                raise ServiceValidationError(
                    f"Unknown meal category {category!r}",
                    details={"allowed": [c.value for c in MealCategory]},
                    code="INVALID_CATEGORY",
                )
        meals = MealRepository(db).list_meals(
            school_id=school_id, category=category, search=search, is_active=is_active
        )
        logger.debug("Catalog query school=%s category=%s -> %d meals", school_id, category, len(meals))
        return meals

    @staticmethod
    def get_meal(db: Session, meal_id: int) -> Meal:
        meal = MealRepository(db).get_by_id(meal_id)
        if meal is None:
            raise NotFoundError(f"Meal {meal_id} not found")
        return meal

    @staticmethod
    def plannable_meals(db: Session, school_id: int) -> List[Meal]:
        """Active meals a plan for ``school_id`` may reference."""
        return CatalogService.get_meals(db, school_id=school_id, is_active=True)
