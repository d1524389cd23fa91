"""School meal pricing routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, get_request_context
from app.context import RequestContext
from domain.schemas import (
    BulkPriceUpdateRequest,
    BulkPriceUpdateResponse,
    PriceTableResponse,
    PriceTableRow,
    PriceUpsertItem,
    ResolvedPriceResponse,
    SchoolMealPriceResponse,
    SchoolMealPricesResponse,
    SchoolMealPriceUpdate,
)
from services import PricingService

router = APIRouter(tags=["School Pricing"])
logger = logging.getLogger("schoolmeals.api.pricing")


@router.get("/schools/{school_id}/meal-prices", response_model=SchoolMealPricesResponse)
def get_school_meal_prices(school_id: int, db: Session = Depends(get_db)):
    """Stored overrides of a school and the version to echo back on bulk save"""
    version, prices = PricingService.get_overrides(db, school_id)
    return SchoolMealPricesResponse(
        school_id=school_id,
        version=version,
        prices=[SchoolMealPriceResponse.model_validate(p) for p in prices],
    )


@router.get("/schools/{school_id}/price-table", response_model=PriceTableResponse)
def get_price_table(school_id: int, db: Session = Depends(get_db)):
    """Every meal offered to the school with base, override and effective price"""
    version, rows = PricingService.price_table(db, school_id)
    return PriceTableResponse(
        school_id=school_id,
        version=version,
        rows=[PriceTableRow(**row) for row in rows],
    )


@router.get(
    "/schools/{school_id}/meals/{meal_id}/price", response_model=ResolvedPriceResponse
)
def get_resolved_price(school_id: int, meal_id: int, db: Session = Depends(get_db)):
    """Price the school charges for a meal"""
    meal, resolved = PricingService.resolve_meal_price(db, school_id, meal_id)
    return ResolvedPriceResponse(
        school_id=school_id,
        meal_id=meal.meal_id,
        price=resolved.price,
        base_price=resolved.base_price,
        school_price=resolved.school_price,
    )


@router.post(
    "/schools/{school_id}/meal-prices/bulk", response_model=BulkPriceUpdateResponse
)
def bulk_update_school_meal_prices(
    school_id: int,
    body: BulkPriceUpdateRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Save the school's full price table.

    Meals without an edited price keep their stored override, or get the
    catalog base price when they have none. Send ``expected_version`` (from
    GET /schools/{id}/meal-prices) to refuse overwriting someone else's save.
    """
    version, batch = PricingService.bulk_update(
        db,
        school_id,
        body.edited_prices,
        expected_version=body.expected_version,
        ctx=ctx,
    )
    return BulkPriceUpdateResponse(
        school_id=school_id,
        version=version,
        prices=[PriceUpsertItem(meal_id=p.meal_id, price=p.price) for p in batch.prices],
    )


@router.put("/school-meal-prices/{price_id}", response_model=SchoolMealPriceResponse)
def update_school_meal_price(
    price_id: int,
    update: SchoolMealPriceUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Change the price or active flag of one override"""
    row = PricingService.update_price(
        db, price_id, price=update.price, is_active=update.is_active, ctx=ctx
    )
    return SchoolMealPriceResponse.model_validate(row)


@router.delete("/school-meal-prices/{price_id}", status_code=status.HTTP_200_OK)
def delete_school_meal_price(
    price_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Remove an override; the meal falls back to its base price"""
    PricingService.delete_price(db, price_id, ctx=ctx)
    return {"status": "ok", "removed": price_id}
