# rental_quotes/schemas/bundle_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from rental_quotes.schemas.equipment_schemas import EquipmentBrief


class BundleItemIn(BaseModel):
    equipment_id: int
    quantity: int = Field(1, ge=1)


class BundleItemOut(BaseModel):
    id: int
    equipment_id: int
    quantity: int
    equipment: Optional[EquipmentBrief] = None

    class Config:
        from_attributes = True


class BundleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    daily_rental_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    discount: Decimal = Field(Decimal("0"), ge=0, le=100, max_digits=5, decimal_places=2)
    is_active: bool = True
    bundle_items: List[BundleItemIn] = []


class BundleUpdate(BaseModel):
    """``bundle_items``, when given, replaces the bundle's current items."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    daily_rental_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    discount: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)
    is_active: Optional[bool] = None
    bundle_items: Optional[List[BundleItemIn]] = None


class BundleOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    daily_rental_price: Decimal
    discount: Decimal
    is_active: bool
    bundle_items: List[BundleItemOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
