from typing import Dict, List, Optional
from decimal import Decimal

from pydantic import BaseModel, Field

from domain.enums import MealCategory
from domain.schemas.common import Price


class MealResponse(BaseModel):
    """Catalog meal"""

    meal_id: int
    name: str
    description: Optional[str] = None
    category: MealCategory
    base_price: Price
    is_active: bool
    school_id: Optional[int] = None

    model_config = {"from_attributes": True}


class SchoolMealPriceResponse(BaseModel):
    """Stored school override"""

    id: int
    school_id: int
    meal_id: int
    price: Price
    is_active: bool

    model_config = {"from_attributes": True}


class SchoolMealPricesResponse(BaseModel):
    """A school's overrides plus the table version to send back on bulk save"""

    school_id: int
    version: int
    prices: List[SchoolMealPriceResponse]


class SchoolMealPriceUpdate(BaseModel):
    """Edit of a single override"""

    price: Optional[Decimal] = Field(None, ge=0, description="New override price")
    is_active: Optional[bool] = None


class PriceTableRow(BaseModel):
    """One line of the school pricing screen"""

    meal_id: int
    name: str
    category: MealCategory
    base_price: Price
    school_price: Optional[Price] = None
    override_active: bool = False
    effective_price: Price


class PriceTableResponse(BaseModel):
    school_id: int
    version: int
    rows: List[PriceTableRow]


class ResolvedPriceResponse(BaseModel):
    school_id: int
    meal_id: int
    price: Price
    base_price: Price
    school_price: Optional[Price] = None


class BulkPriceUpdateRequest(BaseModel):
    """Edited prices keyed by meal id, as typed by the operator"""

    edited_prices: Dict[int, str] = Field(
        default_factory=dict, description='e.g. {"7": "12.50"}'
    )
    expected_version: Optional[int] = Field(
        None,
        ge=0,
        description="Version read with the overrides; a mismatch rejects the save",
    )


class PriceUpsertItem(BaseModel):
    meal_id: int
    price: Price


class BulkPriceUpdateResponse(BaseModel):
    school_id: int
    version: int
    prices: List[PriceUpsertItem]
