# rental_quotes/schemas/quotation_schemas.py
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from rental_quotes.models.quotation_models import ItemType, QuotationStatus

# a section has a field called "date"
SectionDate = date

# upper bound of an Integer column
INT_MAX = 2_147_483_647


# --------------------------
# Quotation Item Schemas
# --------------------------
class QuotationItemCreate(BaseModel):
    """
    ``item_name`` and ``price_per_day`` may be omitted when ``equipment_id`` is
    given; they are then taken from the equipment.
    """
    section_id: Optional[int] = None
    equipment_id: Optional[int] = None
    item_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    quantity: int = Field(..., ge=0, le=INT_MAX)
    unit: str = Field("Set", max_length=50)
    price_per_day: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    days: int = Field(1, ge=0, le=INT_MAX)
    remarks: Optional[str] = Field(None, max_length=500)
    type: ItemType = ItemType.rental
    is_active: bool = True

    @model_validator(mode="after")
    def require_name_and_price_without_equipment(self):
        if self.equipment_id is None:
            if not self.item_name:
                raise ValueError("item_name is required for items without equipment")
            if self.price_per_day is None:
                raise ValueError("price_per_day is required for items without equipment")
        return self


class QuotationItemUpdate(BaseModel):
    section_id: Optional[int] = None
    equipment_id: Optional[int] = None
    item_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0, le=INT_MAX)
    unit: Optional[str] = Field(None, max_length=50)
    price_per_day: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    days: Optional[int] = Field(None, ge=0, le=INT_MAX)
    remarks: Optional[str] = Field(None, max_length=500)
    type: Optional[ItemType] = None
    is_active: Optional[bool] = None


class QuotationItemOut(BaseModel):
    id: int
    quotation_id: int
    section_id: Optional[int] = None
    equipment_id: Optional[int] = None
    item_name: str
    description: Optional[str] = None
    quantity: int
    unit: Optional[str] = None
    price_per_day: Decimal
    days: int
    total: Decimal
    remarks: Optional[str] = None
    type: ItemType
    is_active: bool

    class Config:
        from_attributes = True


# --------------------------
# Quotation Section Schemas
# --------------------------
class SectionItemCreate(QuotationItemCreate):
    section_id: None = None


class QuotationSectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: SectionDate
    description: Optional[str] = None
    is_active: bool = True
    items: List[SectionItemCreate] = []


class QuotationSectionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[SectionDate] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class QuotationSectionOut(BaseModel):
    id: int
    quotation_id: int
    name: str
    date: SectionDate
    description: Optional[str] = None
    subtotal: Decimal
    is_active: bool
    items: List[QuotationItemOut] = []

    class Config:
        from_attributes = True


# --------------------------
# Quotation Schemas
# --------------------------
class QuotationCreate(BaseModel):
    client_name: str = Field(..., min_length=1, max_length=255)
    client_email: Optional[EmailStr] = None
    client_phone: Optional[str] = Field(None, max_length=50)
    client_address: Optional[str] = None
    project_name: Optional[str] = Field(None, max_length=255)
    project_description: Optional[str] = None
    issue_date: date
    valid_until: Optional[date] = None
    tax: Decimal = Field(Decimal("0"), ge=0, le=100, decimal_places=2)
    discount: Decimal = Field(Decimal("0"), ge=0, le=100, decimal_places=2)
    status: QuotationStatus = QuotationStatus.draft
    notes: Optional[str] = None
    terms: Optional[str] = None
    sections: List[QuotationSectionCreate] = []
    items: List[SectionItemCreate] = []


class QuotationUpdate(BaseModel):
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    client_email: Optional[EmailStr] = None
    client_phone: Optional[str] = Field(None, max_length=50)
    client_address: Optional[str] = None
    project_name: Optional[str] = Field(None, max_length=255)
    project_description: Optional[str] = None
    issue_date: Optional[date] = None
    valid_until: Optional[date] = None
    tax: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    discount: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    notes: Optional[str] = None
    terms: Optional[str] = None


class QuotationStatusUpdate(BaseModel):
    status: QuotationStatus


class QuotationSummaryOut(BaseModel):
    id: int
    quotation_number: str
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    client_address: Optional[str] = None
    project_name: Optional[str] = None
    project_description: Optional[str] = None
    issue_date: date
    valid_until: Optional[date] = None
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    status: QuotationStatus
    notes: Optional[str] = None
    terms: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QuotationOut(QuotationSummaryOut):
    sections: List[QuotationSectionOut] = []
    items: List[QuotationItemOut] = []
