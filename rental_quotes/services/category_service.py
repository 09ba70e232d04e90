# rental_quotes/services/category_service.py
import logging

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from rental_quotes.models.equipment_models import Equipment, EquipmentCategory
from rental_quotes.schemas.equipment_schemas import CategoryCreate, CategoryOut, CategoryUpdate
from rental_quotes.utils.pagination import PaginationParams, apply_sorting, paginate

logger = logging.getLogger(__name__)

CATEGORY_SORT_COLUMNS = {
    "id": EquipmentCategory.id,
    "name": EquipmentCategory.name,
    "created_at": EquipmentCategory.created_at,
    "updated_at": EquipmentCategory.updated_at,
}


async def get_category_or_404(db: AsyncSession, category_id: int) -> EquipmentCategory:
    category = await db.get(EquipmentCategory, category_id, populate_existing=True)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


# ---------------------------------------------------
# CREATE CATEGORY
# ---------------------------------------------------
async def create_category(db: AsyncSession, data: CategoryCreate, current_user) -> dict:
    category = EquipmentCategory(**data.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)

    logger.info("%s created category '%s' (ID: %s)", current_user.username, category.name, category.id)
    return {"status": True, "message": "Category created successfully", "data": CategoryOut.model_validate(category)}


# ---------------------------------------------------
# LIST CATEGORIES
# ---------------------------------------------------
async def list_categories(db: AsyncSession, params: PaginationParams, is_active: bool = None) -> dict:
    query = select(EquipmentCategory)
    if params.search:
        pattern = f"%{params.search}%"
        query = query.where(or_(
            EquipmentCategory.name.ilike(pattern),
            EquipmentCategory.description.ilike(pattern),
        ))
    if is_active is not None:
        query = query.where(EquipmentCategory.is_active == is_active)

    query = apply_sorting(query, params, CATEGORY_SORT_COLUMNS, default_sort="name")
    categories, meta = await paginate(db, query, params)
    return {
        "status": True,
        "message": "Categories retrieved successfully",
        "data": [CategoryOut.model_validate(c) for c in categories],
        "meta": meta,
    }


# ---------------------------------------------------
# GET SINGLE CATEGORY
# ---------------------------------------------------
async def get_category(db: AsyncSession, category_id: int) -> dict:
    category = await get_category_or_404(db, category_id)
    return {"status": True, "message": "Category retrieved successfully", "data": CategoryOut.model_validate(category)}


# ---------------------------------------------------
# UPDATE CATEGORY
# ---------------------------------------------------
async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate, current_user) -> dict:
    category = await get_category_or_404(db, category_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key in ("name", "is_active"):
            continue
        setattr(category, key, value)

    await db.commit()
    await db.refresh(category)

    logger.info("%s updated category '%s' (ID: %s)", current_user.username, category.name, category.id)
    return {"status": True, "message": "Category updated successfully", "data": CategoryOut.model_validate(category)}


# ---------------------------------------------------
# DELETE CATEGORY
# ---------------------------------------------------
async def delete_category(db: AsyncSession, category_id: int, current_user) -> dict:
    category = await get_category_or_404(db, category_id)

    in_use = (await db.execute(
        select(func.count(Equipment.id)).where(Equipment.category_id == category_id)
    )).scalar()
    if in_use:
        raise HTTPException(
            status_code=400,
            detail=f"Category '{category.name}' still has {in_use} equipment item(s) and cannot be deleted",
        )

    await db.delete(category)
    await db.commit()

    logger.info("%s deleted category '%s' (ID: %s)", current_user.username, category.name, category_id)
    return {"status": True, "message": "Category deleted successfully"}
