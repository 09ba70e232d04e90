# rental_quotes/routers/bundles.py
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_quotes.core.db import get_db
from rental_quotes.schemas.bundle_schemas import BundleCreate, BundleOut, BundleUpdate
from rental_quotes.schemas.response_schemas import ListResponse, MessageResponse, ResponseMessage
from rental_quotes.services.bundle_service import (
    create_bundle, list_bundles, get_bundle, update_bundle, delete_bundle
)
from rental_quotes.utils.check_roles import ADMIN, STAFF, require_role
from rental_quotes.utils.get_user import get_current_user
from rental_quotes.utils.pagination import PaginationParams

router = APIRouter(prefix="/bundles", tags=["Equipment Bundles"])


@router.post("/", response_model=ResponseMessage[BundleOut], status_code=status.HTTP_201_CREATED)
@require_role(STAFF)
async def create_bundle_route(
    data: BundleCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_bundle(db, data, _user)


@router.get("/", response_model=ListResponse[BundleOut])
@require_role(STAFF)
async def list_bundles_route(
    params: PaginationParams = Depends(),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_bundles(db, params, min_price=min_price, max_price=max_price, is_active=is_active)


@router.get("/{bundle_id}", response_model=ResponseMessage[BundleOut])
@require_role(STAFF)
async def get_bundle_route(bundle_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await get_bundle(db, bundle_id)


@router.put("/{bundle_id}", response_model=ResponseMessage[BundleOut])
@require_role(STAFF)
async def update_bundle_route(
    bundle_id: int,
    data: BundleUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """
    A ``bundle_items`` list in the body replaces the bundle's current items.
    """
    return await update_bundle(db, bundle_id, data, _user)


@router.delete("/{bundle_id}", response_model=MessageResponse)
@require_role([ADMIN])
async def delete_bundle_route(bundle_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await delete_bundle(db, bundle_id, _user)
