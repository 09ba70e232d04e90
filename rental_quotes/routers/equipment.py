# rental_quotes/routers/equipment.py
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_quotes.core.db import get_db
from rental_quotes.schemas.equipment_schemas import EquipmentCreate, EquipmentOut, EquipmentUpdate
from rental_quotes.schemas.response_schemas import ListResponse, MessageResponse, ResponseMessage
from rental_quotes.services.equipment_service import (
    create_equipment,
    list_equipment,
    list_equipment_by_category,
    get_equipment,
    update_equipment,
    delete_equipment,
)
from rental_quotes.utils.check_roles import ADMIN, STAFF, require_role
from rental_quotes.utils.get_user import get_current_user
from rental_quotes.utils.pagination import PaginationParams

router = APIRouter(prefix="/equipment", tags=["Equipment"])


# ---------------------------------------------------
# CREATE EQUIPMENT
# ---------------------------------------------------
@router.post("/", response_model=ResponseMessage[EquipmentOut], status_code=status.HTTP_201_CREATED)
@require_role(STAFF)
async def create_equipment_route(
    data: EquipmentCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_equipment(db, data, _user)


# ---------------------------------------------------
# LIST EQUIPMENT
# ---------------------------------------------------
@router.get("/", response_model=ListResponse[EquipmentOut])
@require_role(STAFF)
async def list_equipment_route(
    params: PaginationParams = Depends(),
    category_id: Optional[int] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_equipment(
        db, params, category_id=category_id, min_price=min_price, max_price=max_price, is_active=is_active
    )


@router.get("/category/{category_id}", response_model=ListResponse[EquipmentOut])
@require_role(STAFF)
async def list_equipment_by_category_route(
    category_id: int,
    params: PaginationParams = Depends(),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_equipment_by_category(db, category_id, params, is_active=is_active)


# ---------------------------------------------------
# GET / UPDATE / DELETE
# ---------------------------------------------------
@router.get("/{equipment_id}", response_model=ResponseMessage[EquipmentOut])
@require_role(STAFF)
async def get_equipment_route(equipment_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await get_equipment(db, equipment_id)


@router.put("/{equipment_id}", response_model=ResponseMessage[EquipmentOut])
@require_role(STAFF)
async def update_equipment_route(
    equipment_id: int,
    data: EquipmentUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_equipment(db, equipment_id, data, _user)


@router.delete("/{equipment_id}", response_model=MessageResponse)
@require_role([ADMIN])
async def delete_equipment_route(
    equipment_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_equipment(db, equipment_id, _user)
