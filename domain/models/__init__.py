"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.meal import Meal, SchoolMealPrice, SchoolPriceTable
from domain.models.meal_plan import MealPlan, MealPlanMeal

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Catalog and pricing
    "Meal",
    "SchoolMealPrice",
    "SchoolPriceTable",
    # Meal plans
    "MealPlan",
    "MealPlanMeal",
]
