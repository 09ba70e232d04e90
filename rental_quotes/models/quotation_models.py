# rental_quotes/models/quotation_models.py
import enum

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, Numeric, Enum,
    CheckConstraint, ForeignKey, func
)
from sqlalchemy.orm import relationship

from rental_quotes.core.db import Base


class QuotationStatus(str, enum.Enum):
    draft = "draft"
    sent = "sent"
    approved = "approved"
    rejected = "rejected"
    converted_to_do = "converted_to_do"
    converted_to_invoice = "converted_to_invoice"


class ItemType(str, enum.Enum):
    rental = "rental"
    service = "service"
    sale = "sale"


# ==================================================
# QUOTATION MODEL
# ==================================================
class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    quotation_number = Column(String(20), unique=True, nullable=False, index=True)

    # Client & project
    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=True)
    client_phone = Column(String(50), nullable=True)
    client_address = Column(Text, nullable=True)
    project_name = Column(String(255), nullable=True)
    project_description = Column(Text, nullable=True)

    issue_date = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=True)

    # Financial fields; tax and discount are percentages
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(
        Enum(QuotationStatus, name="quotation_status"),
        nullable=False,
        default=QuotationStatus.draft,
    )
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    sections = relationship(
        "QuotationSection",
        back_populates="quotation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by=lambda: [QuotationSection.date, QuotationSection.id],
    )
    items = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="QuotationItem.id",
    )

    __table_args__ = (
        CheckConstraint(tax >= 0, name="check_quotation_tax_non_negative"),
        CheckConstraint(discount >= 0, name="check_quotation_discount_non_negative"),
    )

    def __repr__(self):
        return f"<Quotation(id={self.id}, number='{self.quotation_number}')>"


# ==================================================
# QUOTATION SECTION MODEL
# ==================================================
class QuotationSection(Base):
    __tablename__ = "quotation_sections"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(
        Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    quotation = relationship("Quotation", back_populates="sections")
    # Items go with their section. Not delete-orphan: unsectioned items are valid.
    items = relationship(
        "QuotationItem",
        back_populates="section",
        cascade="all",
        passive_deletes=True,
        lazy="selectin",
        order_by="QuotationItem.id",
    )


# ==================================================
# QUOTATION ITEM MODEL
# ==================================================
class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(
        Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    section_id = Column(
        Integer, ForeignKey("quotation_sections.id", ondelete="CASCADE"), nullable=True, index=True
    )
    equipment_id = Column(
        Integer, ForeignKey("equipment.id", ondelete="SET NULL"), nullable=True, index=True
    )

    item_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False)
    unit = Column(String(50), nullable=True, default="Set")
    price_per_day = Column(Numeric(12, 2), nullable=False)
    days = Column(Integer, nullable=False, default=1)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    remarks = Column(String(500), nullable=True)
    type = Column(Enum(ItemType, name="quotation_item_type"), nullable=False, default=ItemType.rental)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    quotation = relationship("Quotation", back_populates="items")
    section = relationship("QuotationSection", back_populates="items")

    __table_args__ = (
        CheckConstraint(quantity >= 0, name="check_item_quantity_non_negative"),
        CheckConstraint(price_per_day >= 0, name="check_item_price_non_negative"),
        CheckConstraint(days >= 0, name="check_item_days_non_negative"),
    )
