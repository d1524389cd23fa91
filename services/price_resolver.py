"""
Price resolution: which price a school actually charges for a meal.

Works on any objects exposing the catalog / override attributes
(``meal_id``, ``base_price`` on meals; ``meal_id``, ``price``, ``is_active``
on overrides), so ORM rows and plain dataclasses are interchangeable.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

CENTS = Decimal("0.01")


def to_price(value: Any) -> Decimal:
    """Normalize a numeric value to a 2-decimal price."""
    if isinstance(value, Decimal):
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ResolvedPrice:
    price: Decimal
    base_price: Decimal
    school_price: Optional[Decimal] = None

    @property
    def is_overridden(self) -> bool:
        return self.school_price is not None


def find_active_override(meal_id: int, overrides: Iterable[Any]) -> Optional[Any]:
    """Return the active override for ``meal_id`` among one school's overrides."""
    for override in overrides:
        if override.meal_id == meal_id and override.is_active:
            return override
    return None


def resolve(meal: Any, overrides: Iterable[Any]) -> ResolvedPrice:
    base_price = to_price(meal.base_price)
    override = find_active_override(meal.meal_id, overrides)
    if override is None:
        return ResolvedPrice(price=base_price, base_price=base_price)
    school_price = to_price(override.price)
    return ResolvedPrice(price=school_price, base_price=base_price, school_price=school_price)


def resolve_price(meal: Any, overrides: Iterable[Any]) -> Decimal:
    """Active school override price if there is one, else the catalog base price."""
    return resolve(meal, overrides).price
