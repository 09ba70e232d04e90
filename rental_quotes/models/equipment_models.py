# rental_quotes/models/equipment_models.py
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Numeric, CheckConstraint,
    ForeignKey, DateTime, Index, func
)
from sqlalchemy.orm import relationship

from rental_quotes.core.db import Base


class EquipmentCategory(Base):
    __tablename__ = "equipment_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # never loaded; the RESTRICT foreign key guards deletes
    equipment = relationship("Equipment", back_populates="category", lazy="raise", passive_deletes="all")

    def __repr__(self):
        return f"<EquipmentCategory(id={self.id}, name='{self.name}')>"


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    daily_rental_price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    category_id = Column(
        Integer,
        ForeignKey("equipment_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    category = relationship("EquipmentCategory", back_populates="equipment", lazy="selectin")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(daily_rental_price >= 0, name="check_equipment_price_non_negative"),
        CheckConstraint(quantity >= 0, name="check_equipment_quantity_non_negative"),
        Index("ix_equipment_name_category", "name", "category_id"),
    )

    def __repr__(self):
        return f"<Equipment(id={self.id}, name='{self.name}')>"
