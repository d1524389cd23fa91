"""
Meal catalog and school pricing models.
"""

from sqlalchemy import (
    Column,
    Integer,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base


class Meal(Base):
    """Catalog meal with its base price"""

    __tablename__ = "meal"

    meal_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    category = Column(Text, nullable=False, index=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    # NULL means the meal is offered to every school
    school_id = Column(Integer, nullable=True, index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("base_price >= 0", name="ck_meal_base_price_non_negative"),
    )

    school_prices = relationship(
        "SchoolMealPrice", back_populates="meal", cascade="all, delete-orphan"
    )


class SchoolMealPrice(Base):
    """School-specific price overriding a meal's base price"""

    __tablename__ = "school_meal_price"

    id = Column(Integer, primary_key=True, autoincrement=True)
    school_id = Column(Integer, nullable=False, index=True)
    meal_id = Column(
        Integer, ForeignKey("meal.meal_id", ondelete="CASCADE"), nullable=False
    )
    price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("school_id", "meal_id", name="uq_school_meal_price"),
        CheckConstraint("price >= 0", name="ck_school_meal_price_non_negative"),
    )

    meal = relationship("Meal", back_populates="school_prices")


class SchoolPriceTable(Base):
    """Version counter of a school's price overrides, bumped by every bulk save"""

    __tablename__ = "school_price_table"

    school_id = Column(Integer, primary_key=True, autoincrement=False)
    version = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
