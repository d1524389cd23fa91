"""
Bulk price reconciliation.

Merges in-progress price edits with a school's stored overrides into one
upsert batch holding a price for every catalog meal. A bulk save therefore
rewrites the school's whole price table, not just the edited rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from app.exceptions import ServiceValidationError
from services.price_resolver import to_price


@dataclass(frozen=True)
class PriceUpsert:
    meal_id: int
    price: Decimal


@dataclass(frozen=True)
class UpsertBatch:
    school_id: int
    prices: List[PriceUpsert]
    expected_version: Optional[int] = None
    edited: FrozenSet[int] = frozenset()


def parse_price(raw: Any) -> Decimal:
    """Parse an edited price ("12.5", "12.50", 12.5) into a non-negative 2-dp Decimal."""
    text = str(raw).strip() if raw is not None else ""
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"{raw!r} is not a number")
    if not value.is_finite():
        raise ValueError(f"{raw!r} is not a number")
    if value < 0:
        raise ValueError(f"{raw!r} is negative")
    return to_price(value)


def reconcile(
    school_id: int,
    catalog_meals: Iterable[Any],
    existing_overrides: Iterable[Any],
    edited_prices: Mapping[int, Any],
    expected_version: Optional[int] = None,
) -> UpsertBatch:
    """
    Compute the price to persist for every catalog meal.

    Precedence per meal: edited value, then the stored override (active or
    not), then the catalog base price. ``edited`` on the result names the
    meals whose override the save turns on; unedited rows keep their flag so
    their effective price does not move.

    Raises:
        ServiceValidationError: an edited value is not a valid price or names a
            meal outside the catalog. Nothing is produced in that case.
    """
    meals = list(catalog_meals)
    stored: Dict[int, Any] = {o.meal_id: o for o in existing_overrides}
    edited = {int(k): v for k, v in (edited_prices or {}).items()}

    errors: Dict[str, str] = {}
    parsed: Dict[int, Decimal] = {}
    for meal_id, raw in edited.items():
        try:
            parsed[meal_id] = parse_price(raw)
        except ValueError as exc:
            errors[str(meal_id)] = str(exc)

    catalog_ids = {m.meal_id for m in meals}
    for meal_id in edited:
        if meal_id not in catalog_ids:
            errors.setdefault(str(meal_id), "meal is not in the catalog")

    if errors:
        raise ServiceValidationError(
            "Invalid meal prices",
            details={"prices": errors},
            code="INVALID_PRICE",
        )

    prices: List[PriceUpsert] = []
    for meal in meals:
        if meal.meal_id in parsed:
            price = parsed[meal.meal_id]
        elif meal.meal_id in stored:
            price = to_price(stored[meal.meal_id].price)
        else:
            price = to_price(meal.base_price)
        prices.append(PriceUpsert(meal_id=meal.meal_id, price=price))

    return UpsertBatch(
        school_id=school_id,
        prices=prices,
        expected_version=expected_version,
        edited=frozenset(parsed),
    )
