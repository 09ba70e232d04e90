# rental_quotes/models/__init__.py
from rental_quotes.models.user_models import User
from rental_quotes.models.equipment_models import Equipment, EquipmentCategory
from rental_quotes.models.bundle_models import EquipmentBundle, EquipmentBundleItem
from rental_quotes.models.quotation_models import (
    Quotation,
    QuotationSection,
    QuotationItem,
    QuotationStatus,
    ItemType,
)
