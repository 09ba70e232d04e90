# rental_quotes/services/equipment_service.py
import logging
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from rental_quotes.models.bundle_models import EquipmentBundleItem
from rental_quotes.models.equipment_models import Equipment, EquipmentCategory
from rental_quotes.schemas.equipment_schemas import EquipmentCreate, EquipmentOut, EquipmentUpdate
from rental_quotes.services.category_service import get_category_or_404
from rental_quotes.utils.pagination import PaginationParams, apply_sorting, paginate

logger = logging.getLogger(__name__)

EQUIPMENT_SORT_COLUMNS = {
    "id": Equipment.id,
    "name": Equipment.name,
    "daily_rental_price": Equipment.daily_rental_price,
    "quantity": Equipment.quantity,
    "category_id": Equipment.category_id,
    "created_at": Equipment.created_at,
    "updated_at": Equipment.updated_at,
}


async def get_equipment_or_404(db: AsyncSession, equipment_id: int) -> Equipment:
    result = await db.execute(
        select(Equipment)
        .where(Equipment.id == equipment_id)
        .execution_options(populate_existing=True)
    )
    equipment = result.scalars().first()
    if not equipment:
        raise HTTPException(status_code=404, detail=f"Equipment {equipment_id} not found")
    return equipment


# ---------------------------------------------------
# CREATE EQUIPMENT
# ---------------------------------------------------
async def create_equipment(db: AsyncSession, data: EquipmentCreate, current_user) -> dict:
    await get_category_or_404(db, data.category_id)

    equipment = Equipment(**data.model_dump())
    db.add(equipment)
    await db.commit()

    db.expunge_all()
    equipment = await get_equipment_or_404(db, equipment.id)
    logger.info("%s created equipment '%s' (ID: %s)", current_user.username, equipment.name, equipment.id)
    return {"status": True, "message": "Equipment created successfully", "data": EquipmentOut.model_validate(equipment)}


# ---------------------------------------------------
# LIST EQUIPMENT
# ---------------------------------------------------
async def list_equipment(
    db: AsyncSession,
    params: PaginationParams,
    category_id: Optional[int] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    is_active: Optional[bool] = None,
) -> dict:
    query = select(Equipment).outerjoin(EquipmentCategory, Equipment.category_id == EquipmentCategory.id)

    if params.search:
        pattern = f"%{params.search}%"
        query = query.where(or_(
            Equipment.name.ilike(pattern),
            Equipment.description.ilike(pattern),
            EquipmentCategory.name.ilike(pattern),
        ))
    if category_id is not None:
        query = query.where(Equipment.category_id == category_id)
    if min_price is not None:
        query = query.where(Equipment.daily_rental_price >= min_price)
    if max_price is not None:
        query = query.where(Equipment.daily_rental_price <= max_price)
    if is_active is not None:
        query = query.where(Equipment.is_active == is_active)

    query = apply_sorting(query, params, EQUIPMENT_SORT_COLUMNS, default_sort="name")
    equipment, meta = await paginate(db, query, params)
    return {
        "status": True,
        "message": "Equipment retrieved successfully",
        "data": [EquipmentOut.model_validate(e) for e in equipment],
        "meta": meta,
    }


async def list_equipment_by_category(db: AsyncSession, category_id: int, params: PaginationParams, **filters) -> dict:
    await get_category_or_404(db, category_id)
    return await list_equipment(db, params, category_id=category_id, **filters)


# ---------------------------------------------------
# GET SINGLE EQUIPMENT
# ---------------------------------------------------
async def get_equipment(db: AsyncSession, equipment_id: int) -> dict:
    equipment = await get_equipment_or_404(db, equipment_id)
    return {"status": True, "message": "Equipment retrieved successfully", "data": EquipmentOut.model_validate(equipment)}


# ---------------------------------------------------
# UPDATE EQUIPMENT
# ---------------------------------------------------
async def update_equipment(db: AsyncSession, equipment_id: int, data: EquipmentUpdate, current_user) -> dict:
    equipment = await get_equipment_or_404(db, equipment_id)
    updates = data.model_dump(exclude_unset=True)

    if updates.get("category_id") is not None and updates["category_id"] != equipment.category_id:
        await get_category_or_404(db, updates["category_id"])

    changes = []
    for key, value in updates.items():
        # required columns cannot be cleared
        if value is None and key in ("name", "daily_rental_price", "quantity", "category_id", "is_active"):
            continue
        if getattr(equipment, key) != value:
            changes.append(key)
            setattr(equipment, key, value)

    await db.commit()
    db.expunge_all()
    equipment = await get_equipment_or_404(db, equipment_id)

    if changes:
        logger.info("%s updated equipment '%s' (ID: %s): %s",
                    current_user.username, equipment.name, equipment.id, ", ".join(changes))
    return {"status": True, "message": "Equipment updated successfully", "data": EquipmentOut.model_validate(equipment)}


# ---------------------------------------------------
# DELETE EQUIPMENT
# ---------------------------------------------------
async def delete_equipment(db: AsyncSession, equipment_id: int, current_user) -> dict:
    equipment = await get_equipment_or_404(db, equipment_id)

    bundle_refs = (await db.execute(
        select(func.count(EquipmentBundleItem.id)).where(EquipmentBundleItem.equipment_id == equipment_id)
    )).scalar()
    if bundle_refs:
        raise HTTPException(
            status_code=400,
            detail=f"Equipment '{equipment.name}' is part of {bundle_refs} bundle item(s) and cannot be deleted",
        )

    await db.delete(equipment)
    await db.commit()

    logger.info("%s deleted equipment '%s' (ID: %s)", current_user.username, equipment.name, equipment_id)
    return {"status": True, "message": "Equipment deleted successfully"}
