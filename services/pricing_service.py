"""School meal pricing service"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.context import RequestContext, SYSTEM_CONTEXT
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.models import Meal, SchoolMealPrice
from repositories import SchoolMealPriceRepository, SchoolPriceTableRepository
from services.catalog_service import CatalogService
from services.price_reconciler import UpsertBatch, reconcile
from services.price_resolver import ResolvedPrice, resolve, to_price

logger = logging.getLogger("schoolmeals.pricing")


class PricingService:
    """Business logic for school-specific meal prices."""

    @staticmethod
    def get_overrides(db: Session, school_id: int) -> Tuple[int, List[SchoolMealPrice]]:
        """Return ``(version, overrides)`` for a school."""
        version = SchoolPriceTableRepository(db).current_version(school_id)
        return version, SchoolMealPriceRepository(db).list_for_school(school_id)

    @staticmethod
    def price_table(db: Session, school_id: int) -> Tuple[int, List[Dict[str, Any]]]:
        """
        Every meal offered to the school with its base, override and effective price.

        Returns:
            ``(version, rows)``; rows follow catalog order
        """
        version, overrides = PricingService.get_overrides(db, school_id)
        by_meal = {o.meal_id: o for o in overrides}
        rows = []
        for meal in CatalogService.get_meals(db, school_id=school_id):
            stored = by_meal.get(meal.meal_id)
            resolved = resolve(meal, overrides)
            rows.append(
                {
                    "meal_id": meal.meal_id,
                    "name": meal.name,
                    "category": meal.category,
                    "base_price": resolved.base_price,
                    "school_price": to_price(stored.price) if stored else None,
                    "override_active": resolved.is_overridden,
                    "effective_price": resolved.price,
                }
            )
        return version, rows

    @staticmethod
    def resolve_meal_price(db: Session, school_id: int, meal_id: int) -> Tuple[Meal, ResolvedPrice]:
        meal = CatalogService.get_meal(db, meal_id)
        stored = SchoolMealPriceRepository(db).get_for_meal(school_id, meal_id)
        return meal, resolve(meal, [stored] if stored else [])

    @staticmethod
    def bulk_update(
        db: Session,
        school_id: int,
        edited_prices: Mapping[int, str],
        expected_version: Optional[int] = None,
        ctx: RequestContext = SYSTEM_CONTEXT,
    ) -> Tuple[int, UpsertBatch]:
        """
        Reconcile edits with the stored overrides and write the full price table.

        The batch is validated before anything is written and committed in a
        single transaction. With ``expected_version`` the save is rejected when
        someone else changed the table since it was read.

        Raises:
            ServiceValidationError: an edited price is invalid
            ConflictError: ``expected_version`` is stale
        """
        catalog = CatalogService.get_meals(db, school_id=school_id)
        prices_repo = SchoolMealPriceRepository(db)
        batch = reconcile(
            school_id,
            catalog,
            prices_repo.list_for_school(school_id),
            edited_prices,
            expected_version=expected_version,
        )
        if not batch.prices:
            raise ServiceValidationError(
                f"No meals are offered to school {school_id}", code="EMPTY_CATALOG"
            )

        try:
            version = SchoolPriceTableRepository(db).bump(school_id, with_lock=True)
            if expected_version is not None and version - 1 != expected_version:
                db.rollback()
                raise ConflictError(
                    "School prices were changed by someone else; reload and retry",
                    details={"expected_version": expected_version, "current_version": version - 1},
                    code="STALE_PRICE_TABLE",
                )
            prices_repo.upsert_many(
                school_id,
                ((p.meal_id, p.price) for p in batch.prices),
                activate=batch.edited,
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Bulk price update failed for school %s", school_id)
            raise

        logger.info(
            "School %s prices saved by %s: %d meals, version %d",
            school_id,
            ctx.actor,
            len(batch.prices),
            version,
        )
        return version, batch

    @staticmethod
    def update_price(
        db: Session,
        price_id: int,
        price: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
        ctx: RequestContext = SYSTEM_CONTEXT,
    ) -> SchoolMealPrice:
        repo = SchoolMealPriceRepository(db)
        row = repo.get_by_id(price_id)
        if row is None:
            raise NotFoundError(f"School meal price {price_id} not found")
        if price is not None and price < 0:
            raise ServiceValidationError("Price must not be negative", code="INVALID_PRICE")

        try:
            if price is not None:
                row.price = to_price(price)
            if is_active is not None:
                row.is_active = is_active
            SchoolPriceTableRepository(db).bump(row.school_id, with_lock=True)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to update school meal price %s", price_id)
            raise
        db.refresh(row)
        logger.info(
            "School %s price for meal %s set to %s (active=%s) by %s",
            row.school_id, row.meal_id, row.price, row.is_active, ctx.actor,
        )
        return row

    @staticmethod
    def delete_price(db: Session, price_id: int, ctx: RequestContext = SYSTEM_CONTEXT) -> None:
        repo = SchoolMealPriceRepository(db)
        row = repo.get_by_id(price_id)
        if row is None:
            raise NotFoundError(f"School meal price {price_id} not found")
        school_id, meal_id = row.school_id, row.meal_id
        try:
            db.delete(row)
            SchoolPriceTableRepository(db).bump(school_id, with_lock=True)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to delete school meal price %s", price_id)
            raise
        logger.info("School %s price for meal %s removed by %s", school_id, meal_id, ctx.actor)
