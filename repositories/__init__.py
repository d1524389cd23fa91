"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.meal_repository import MealRepository
from repositories.school_price_repository import (
    SchoolMealPriceRepository,
    SchoolPriceTableRepository,
)
from repositories.meal_plan_repository import MealPlanRepository, MealPlanMealRepository

__all__ = [
    "BaseRepository",
    "MealRepository",
    "SchoolMealPriceRepository",
    "SchoolPriceTableRepository",
    "MealPlanRepository",
    "MealPlanMealRepository",
]
