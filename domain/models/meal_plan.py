"""
Meal planning models.
"""

from sqlalchemy import (
    Column,
    Integer,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    Date,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base


class MealPlan(Base):
    """A school's meal calendar for a bounded date range"""

    __tablename__ = "meal_plan"

    plan_id = Column(Integer, primary_key=True, autoincrement=True)
    school_id = Column(Integer, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    plan_type = Column(Text, nullable=False, default="weekly")
    status = Column(Text, nullable=False, default="active")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_meal_plan_date_range"),
    )

    meals = relationship(
        "MealPlanMeal",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="MealPlanMeal.entry_id",
    )

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class MealPlanMeal(Base):
    """Resolved meal entry of a plan (weekly slot or dated assignment)"""

    __tablename__ = "meal_plan_meal"

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(
        Integer, ForeignKey("meal_plan.plan_id", ondelete="CASCADE"), nullable=False
    )
    meal_id = Column(Integer, ForeignKey("meal.meal_id"), nullable=False)
    day_of_week = Column(Integer, nullable=True)  # weekly plans, 1=Sunday .. 5=Thursday
    meal_date = Column(Date, nullable=True)  # monthly plans
    category = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    base_price = Column(Numeric(10, 2), nullable=False)
    school_price = Column(Numeric(10, 2), nullable=True)
    order = Column("sort_order", Integer, nullable=True)

    plan = relationship("MealPlan", back_populates="meals")
