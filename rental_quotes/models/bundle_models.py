# rental_quotes/models/bundle_models.py
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Numeric, CheckConstraint,
    ForeignKey, DateTime, func
)
from sqlalchemy.orm import relationship

from rental_quotes.core.db import Base


# ==================================================
# EQUIPMENT BUNDLE
# ==================================================
class EquipmentBundle(Base):
    """
    A fixed-price package of equipment. ``daily_rental_price`` and ``discount``
    are set by an operator; neither is derived from the member equipment.
    """
    __tablename__ = "equipment_bundles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    daily_rental_price = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bundle_items = relationship(
        "EquipmentBundleItem",
        back_populates="bundle",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="EquipmentBundleItem.id",
    )

    __table_args__ = (
        CheckConstraint(daily_rental_price >= 0, name="check_bundle_price_non_negative"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="check_bundle_discount_range"),
    )

    def __repr__(self):
        return f"<EquipmentBundle(id={self.id}, name='{self.name}')>"


# ==================================================
# EQUIPMENT BUNDLE ITEM
# ==================================================
class EquipmentBundleItem(Base):
    __tablename__ = "equipment_bundle_items"

    id = Column(Integer, primary_key=True, index=True)
    bundle_id = Column(
        Integer, ForeignKey("equipment_bundles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    equipment_id = Column(
        Integer, ForeignKey("equipment.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bundle = relationship("EquipmentBundle", back_populates="bundle_items")
    equipment = relationship("Equipment", lazy="selectin")

    __table_args__ = (
        CheckConstraint(quantity >= 1, name="check_bundle_item_quantity_positive"),
    )
