"""
Meal Plan Repository - Data access layer for meal plan operations
"""

from datetime import date
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session, selectinload

from repositories.base import BaseRepository
from domain.models import MealPlan, MealPlanMeal


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def get_by_id(self, plan_id: int) -> Optional[MealPlan]:
        """Get meal plan by ID with its entries"""
        return (
            self.db.query(MealPlan)
            .options(selectinload(MealPlan.meals))
            .filter(MealPlan.plan_id == plan_id)
            .first()
        )

    def list_plans(self, school_id: Optional[int] = None) -> List[MealPlan]:
        """List plans, newest period first, optionally for a single school"""
        query = self.db.query(MealPlan).options(selectinload(MealPlan.meals))
        if school_id is not None:
            query = query.filter(MealPlan.school_id == school_id)
        return query.order_by(MealPlan.start_date.desc(), MealPlan.plan_id.desc()).all()

    def replace_meals(self, plan: MealPlan, meals: Iterable[MealPlanMeal]) -> MealPlan:
        """Swap every entry of the plan for ``meals``. Does not commit."""
        plan.meals.clear()
        self.db.flush()
        plan.meals.extend(meals)
        self.db.flush()
        return plan


class MealPlanMealRepository(BaseRepository[MealPlanMeal]):
    """Repository for resolved meal plan entries"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlanMeal)

    def get_by_id(self, entry_id: int) -> Optional[MealPlanMeal]:
        return self.db.query(MealPlanMeal).filter(MealPlanMeal.entry_id == entry_id).first()

    def remove_dates(self, plan: MealPlan, dates: Iterable[date]) -> int:
        """Drop the plan's entries on ``dates``; other entries are untouched. Does not commit."""
        dates = set(dates)
        stale = [entry for entry in plan.meals if entry.meal_date in dates]
        for entry in stale:
            plan.meals.remove(entry)
        self.db.flush()
        return len(stale)
