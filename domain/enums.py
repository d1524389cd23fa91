"""
Domain enums for the SchoolMeals application.
Contains all enumeration types used across the domain models.
"""

import enum


class MealCategory(str, enum.Enum):
    """Fixed set of catalog meal categories"""

    HOT_MEAL = "hot_meal"
    SANDWICH = "sandwich"
    SANDWICH_XL = "sandwich_xl"
    BURGER = "burger"
    CREPE = "crepe"
    NURSERY = "nursery"


class PlanType(str, enum.Enum):
    """How meals are attached to a plan"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PlanStatus(str, enum.Enum):
    """Meal plan activation state"""

    ACTIVE = "active"
    INACTIVE = "inactive"


class DayOfWeek(int, enum.Enum):
    """School days covered by a weekly plan (Friday and Saturday are never scheduled)"""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5

    def next_school_day(self) -> "DayOfWeek":
        """Thursday wraps to Sunday."""
        if self is DayOfWeek.THURSDAY:
            return DayOfWeek.SUNDAY
        return DayOfWeek(self.value + 1)


SCHOOL_DAYS = tuple(DayOfWeek)
