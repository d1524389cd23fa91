"""
Meal Repository - Data access layer for the meal catalog
"""

from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Meal


class MealRepository(BaseRepository[Meal]):
    """Repository for catalog meals"""

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def get_by_id(self, meal_id: int) -> Optional[Meal]:
        """Get meal by ID"""
        return self.db.query(Meal).filter(Meal.meal_id == meal_id).first()

    def list_meals(
        self,
        school_id: Optional[int] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> List[Meal]:
        """
        List catalog meals.

        school_id keeps meals offered to every school plus the ones reserved
        for that school; without it every meal is returned.
        """
        query = self.db.query(Meal)
        if school_id is not None:
            query = query.filter(or_(Meal.school_id.is_(None), Meal.school_id == school_id))
        if category:
            query = query.filter(Meal.category == category)
        if search:
            query = query.filter(Meal.name.ilike(f"%{search}%"))
        if is_active is not None:
            query = query.filter(Meal.is_active.is_(is_active))
        return query.order_by(Meal.category, Meal.name, Meal.meal_id).all()
