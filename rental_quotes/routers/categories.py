# rental_quotes/routers/categories.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_quotes.core.db import get_db
from rental_quotes.schemas.equipment_schemas import CategoryCreate, CategoryOut, CategoryUpdate
from rental_quotes.schemas.response_schemas import ListResponse, MessageResponse, ResponseMessage
from rental_quotes.services.category_service import (
    create_category, list_categories, get_category, update_category, delete_category
)
from rental_quotes.utils.check_roles import ADMIN, STAFF, require_role
from rental_quotes.utils.get_user import get_current_user
from rental_quotes.utils.pagination import PaginationParams

router = APIRouter(prefix="/categories", tags=["Equipment Categories"])


@router.post("/", response_model=ResponseMessage[CategoryOut], status_code=status.HTTP_201_CREATED)
@require_role(STAFF)
async def create_category_route(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_category(db, data, _user)


@router.get("/", response_model=ListResponse[CategoryOut])
@require_role(STAFF)
async def list_categories_route(
    params: PaginationParams = Depends(),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_categories(db, params, is_active=is_active)


@router.get("/{category_id}", response_model=ResponseMessage[CategoryOut])
@require_role(STAFF)
async def get_category_route(category_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await get_category(db, category_id)


@router.put("/{category_id}", response_model=ResponseMessage[CategoryOut])
@require_role(STAFF)
async def update_category_route(
    category_id: int,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_category(db, category_id, data, _user)


@router.delete("/{category_id}", response_model=MessageResponse)
@require_role([ADMIN])
async def delete_category_route(category_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await delete_category(db, category_id, _user)
