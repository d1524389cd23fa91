"""Services package - Business logic layer"""

from services.catalog_service import CatalogService
from services.pricing_service import PricingService
from services.meal_plan_service import MealPlanService

# Note: price_resolver, price_reconciler, weekly_scheduler, monthly_assignor and
# plan_builder are pure functions over in-memory state, not service classes

__all__ = [
    "CatalogService",
    "PricingService",
    "MealPlanService",
]
