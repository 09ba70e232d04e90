# rental_quotes/services/bundle_service.py
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from rental_quotes.models.bundle_models import EquipmentBundle, EquipmentBundleItem
from rental_quotes.models.equipment_models import Equipment
from rental_quotes.schemas.bundle_schemas import BundleCreate, BundleItemIn, BundleOut, BundleUpdate
from rental_quotes.utils.pagination import PaginationParams, apply_sorting, paginate

logger = logging.getLogger(__name__)

BUNDLE_SORT_COLUMNS = {
    "id": EquipmentBundle.id,
    "name": EquipmentBundle.name,
    "daily_rental_price": EquipmentBundle.daily_rental_price,
    "discount": EquipmentBundle.discount,
    "created_at": EquipmentBundle.created_at,
    "updated_at": EquipmentBundle.updated_at,
}


async def get_bundle_or_404(db: AsyncSession, bundle_id: int) -> EquipmentBundle:
    result = await db.execute(
        select(EquipmentBundle)
        .where(EquipmentBundle.id == bundle_id)
        .execution_options(populate_existing=True)
    )
    bundle = result.scalars().first()
    if not bundle:
        raise HTTPException(status_code=404, detail="Bundle not found")
    return bundle


async def _build_bundle_items(db: AsyncSession, items_in: Iterable[BundleItemIn]) -> List[EquipmentBundleItem]:
    items_in = list(items_in)
    wanted = {item.equipment_id for item in items_in}
    if wanted:
        found = set((await db.execute(select(Equipment.id).where(Equipment.id.in_(wanted)))).scalars().all())
        missing = sorted(wanted - found)
        if missing:
            raise HTTPException(status_code=404, detail=f"Equipment not found: {missing}")
    return [EquipmentBundleItem(equipment_id=i.equipment_id, quantity=i.quantity) for i in items_in]


# --------------------------
# CREATE BUNDLE
# --------------------------
async def create_bundle(db: AsyncSession, data: BundleCreate, current_user) -> dict:
    bundle = EquipmentBundle(**data.model_dump(exclude={"bundle_items"}))
    bundle.bundle_items = await _build_bundle_items(db, data.bundle_items)

    db.add(bundle)
    await db.commit()

    db.expunge_all()
    bundle = await get_bundle_or_404(db, bundle.id)
    logger.info("%s created bundle '%s' (ID: %s) with %d item(s)",
                current_user.username, bundle.name, bundle.id, len(bundle.bundle_items))
    return {"status": True, "message": "Bundle created successfully", "data": BundleOut.model_validate(bundle)}


# --------------------------
# LIST BUNDLES
# --------------------------
async def list_bundles(
    db: AsyncSession,
    params: PaginationParams,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    is_active: Optional[bool] = None,
) -> dict:
    query = select(EquipmentBundle)
    if params.search:
        pattern = f"%{params.search}%"
        query = query.where(or_(
            EquipmentBundle.name.ilike(pattern),
            EquipmentBundle.description.ilike(pattern),
        ))
    if min_price is not None:
        query = query.where(EquipmentBundle.daily_rental_price >= min_price)
    if max_price is not None:
        query = query.where(EquipmentBundle.daily_rental_price <= max_price)
    if is_active is not None:
        query = query.where(EquipmentBundle.is_active == is_active)

    query = apply_sorting(query, params, BUNDLE_SORT_COLUMNS, default_sort="name")
    bundles, meta = await paginate(db, query, params)
    return {
        "status": True,
        "message": "Bundles retrieved successfully",
        "data": [BundleOut.model_validate(b) for b in bundles],
        "meta": meta,
    }


# --------------------------
# GET SINGLE BUNDLE
# --------------------------
async def get_bundle(db: AsyncSession, bundle_id: int) -> dict:
    bundle = await get_bundle_or_404(db, bundle_id)
    return {"status": True, "message": "Bundle retrieved successfully", "data": BundleOut.model_validate(bundle)}


# --------------------------
# UPDATE BUNDLE
# --------------------------
async def update_bundle(db: AsyncSession, bundle_id: int, data: BundleUpdate, current_user) -> dict:
    bundle = await get_bundle_or_404(db, bundle_id)
    updates = data.model_dump(exclude_unset=True, exclude={"bundle_items"})

    for key, value in updates.items():
        if value is None and key in ("name", "daily_rental_price", "discount", "is_active"):
            continue
        setattr(bundle, key, value)

    if data.bundle_items is not None:
        # replaced wholesale; the old rows go through delete-orphan
        bundle.bundle_items = await _build_bundle_items(db, data.bundle_items)

    await db.commit()

    db.expunge_all()
    bundle = await get_bundle_or_404(db, bundle_id)
    logger.info("%s updated bundle '%s' (ID: %s)", current_user.username, bundle.name, bundle.id)
    return {"status": True, "message": "Bundle updated successfully", "data": BundleOut.model_validate(bundle)}


# --------------------------
# DELETE BUNDLE
# --------------------------
async def delete_bundle(db: AsyncSession, bundle_id: int, current_user) -> dict:
    bundle = await get_bundle_or_404(db, bundle_id)
    item_count = len(bundle.bundle_items)

    await db.delete(bundle)
    await db.commit()

    logger.info("%s deleted bundle '%s' (ID: %s) and %d bundle item(s)",
                current_user.username, bundle.name, bundle_id, item_count)
    return {"status": True, "message": "Bundle deleted successfully"}
