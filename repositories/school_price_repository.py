"""
School Price Repository - Data access layer for school price overrides
"""

from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import SchoolMealPrice, SchoolPriceTable


class SchoolMealPriceRepository(BaseRepository[SchoolMealPrice]):
    """Repository for per-school meal price overrides"""

    def __init__(self, db: Session):
        super().__init__(db, SchoolMealPrice)

    def get_by_id(self, price_id: int) -> Optional[SchoolMealPrice]:
        """Get override by ID"""
        return self.db.query(SchoolMealPrice).filter(SchoolMealPrice.id == price_id).first()

    def list_for_school(self, school_id: int) -> List[SchoolMealPrice]:
        """All overrides of a school, active or not"""
        return (
            self.db.query(SchoolMealPrice)
            .filter(SchoolMealPrice.school_id == school_id)
            .order_by(SchoolMealPrice.meal_id)
            .all()
        )

    def get_for_meal(self, school_id: int, meal_id: int) -> Optional[SchoolMealPrice]:
        return (
            self.db.query(SchoolMealPrice)
            .filter(
                SchoolMealPrice.school_id == school_id,
                SchoolMealPrice.meal_id == meal_id,
            )
            .first()
        )

    def upsert_many(
        self,
        school_id: int,
        prices: Iterable[Tuple[int, Decimal]],
        activate: Iterable[int] = (),
    ) -> List[SchoolMealPrice]:
        """
        Insert or update one override per (meal_id, price) pair.

        New rows are created active. Existing rows keep their active flag
        unless their meal_id is listed in ``activate``. Does not commit; the
        caller owns the transaction so the whole batch lands or none of it does.
        """
        existing = {row.meal_id: row for row in self.list_for_school(school_id)}
        activate = set(activate)
        rows: List[SchoolMealPrice] = []
        for meal_id, price in prices:
            row = existing.get(meal_id)
            if row is None:
                row = SchoolMealPrice(school_id=school_id, meal_id=meal_id, price=price, is_active=True)
                self.db.add(row)
            else:
                row.price = price
                if meal_id in activate:
                    row.is_active = True
            rows.append(row)
        self.db.flush()
        return rows


class SchoolPriceTableRepository(BaseRepository[SchoolPriceTable]):
    """Repository for the per-school override table version"""

    def __init__(self, db: Session):
        super().__init__(db, SchoolPriceTable)

    def get_by_id(self, school_id: int) -> Optional[SchoolPriceTable]:
        return self.db.query(SchoolPriceTable).filter(SchoolPriceTable.school_id == school_id).first()

    def current_version(self, school_id: int) -> int:
        table = self.get_by_id(school_id)
        return table.version if table else 0

    def bump(self, school_id: int, with_lock: bool = False) -> int:
        """Increment the version (creating the row at 1). Does not commit."""
        query = self.db.query(SchoolPriceTable).filter(SchoolPriceTable.school_id == school_id)
        if with_lock:
            query = query.with_for_update()
        table = query.first()
        if table is None:
            table = SchoolPriceTable(school_id=school_id, version=1)
            self.db.add(table)
        else:
            table.version = table.version + 1
        self.db.flush()
        return table.version
