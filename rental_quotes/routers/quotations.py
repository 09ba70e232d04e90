# rental_quotes/routers/quotations.py
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_quotes.core.config import Settings, get_settings
from rental_quotes.core.db import get_db
from rental_quotes.models.quotation_models import QuotationStatus
from rental_quotes.schemas.quotation_schemas import (
    QuotationCreate,
    QuotationItemCreate,
    QuotationItemUpdate,
    QuotationOut,
    QuotationSectionCreate,
    QuotationSectionUpdate,
    QuotationStatusUpdate,
    QuotationSummaryOut,
    QuotationUpdate,
)
from rental_quotes.schemas.response_schemas import ListResponse, MessageResponse, ResponseMessage
from rental_quotes.services.quotation_service import (
    create_quotation,
    list_quotations,
    get_quotation,
    update_quotation,
    delete_quotation,
    update_status,
    add_item,
    update_item,
    remove_item,
    add_section,
    update_section,
    remove_section,
    export_quotation,
)
from rental_quotes.utils.check_roles import ADMIN, STAFF, require_role
from rental_quotes.utils.get_user import get_current_user
from rental_quotes.utils.pagination import PaginationParams

router = APIRouter(prefix="/quotations", tags=["Quotations"])


# --------------------------
# CREATE QUOTATION
# --------------------------
@router.post("/", response_model=ResponseMessage[QuotationOut], status_code=status.HTTP_201_CREATED)
@require_role(STAFF)
async def create_quotation_route(
    data: QuotationCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _user=Depends(get_current_user),
):
    return await create_quotation(db, data, _user, settings)


# --------------------------
# LIST QUOTATIONS
# --------------------------
@router.get("/", response_model=ListResponse[QuotationSummaryOut])
@require_role(STAFF)
async def list_quotations_route(
    params: PaginationParams = Depends(),
    status_filter: Optional[QuotationStatus] = Query(None, alias="status"),
    from_date: Optional[date] = Query(None, description="Issue date lower bound, inclusive"),
    to_date: Optional[date] = Query(None, description="Issue date upper bound, inclusive"),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_quotations(db, params, status_filter=status_filter, from_date=from_date, to_date=to_date)


# --------------------------
# GET / UPDATE / DELETE QUOTATION
# --------------------------
@router.get("/{quotation_id}", response_model=ResponseMessage[QuotationOut])
@require_role(STAFF)
async def get_quotation_route(quotation_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await get_quotation(db, quotation_id)


@router.put("/{quotation_id}", response_model=ResponseMessage[QuotationOut])
@require_role(STAFF)
async def update_quotation_route(
    quotation_id: int,
    data: QuotationUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_quotation(db, quotation_id, data, _user)


@router.delete("/{quotation_id}", response_model=MessageResponse)
@require_role([ADMIN])
async def delete_quotation_route(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_quotation(db, quotation_id, _user)


@router.put("/{quotation_id}/status", response_model=ResponseMessage[QuotationOut])
@require_role(STAFF)
async def update_status_route(
    quotation_id: int,
    data: QuotationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_status(db, quotation_id, data.status, _user)


# --------------------------
# ITEMS
# --------------------------
@router.post("/{quotation_id}/items", response_model=ResponseMessage[QuotationOut], status_code=status.HTTP_201_CREATED)
@require_role(STAFF)
async def add_item_route(
    quotation_id: int,
    data: QuotationItemCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await add_item(db, quotation_id, data, _user)


@router.put("/{quotation_id}/items/{item_id}", response_model=ResponseMessage[QuotationOut])
@require_role(STAFF)
async def update_item_route(
    quotation_id: int,
    item_id: int,
    data: QuotationItemUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_item(db, quotation_id, item_id, data, _user)


@router.delete("/{quotation_id}/items/{item_id}", response_model=ResponseMessage[QuotationOut])
@require_role(STAFF)
async def remove_item_route(
    quotation_id: int,
    item_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await remove_item(db, quotation_id, item_id, _user)


# --------------------------
# SECTIONS
# --------------------------
@router.post(
    "/{quotation_id}/sections", response_model=ResponseMessage[QuotationOut], status_code=status.HTTP_201_CREATED
)
@require_role(STAFF)
async def add_section_route(
    quotation_id: int,
    data: QuotationSectionCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await add_section(db, quotation_id, data, _user)


@router.put("/{quotation_id}/sections/{section_id}", response_model=ResponseMessage[QuotationOut])
@require_role(STAFF)
async def update_section_route(
    quotation_id: int,
    section_id: int,
    data: QuotationSectionUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_section(db, quotation_id, section_id, data, _user)


@router.delete("/{quotation_id}/sections/{section_id}", response_model=ResponseMessage[QuotationOut])
@require_role(STAFF)
async def remove_section_route(
    quotation_id: int,
    section_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await remove_section(db, quotation_id, section_id, _user)


# --------------------------
# EXPORT
# --------------------------
@router.get("/{quotation_id}/export/{export_format}")
@require_role(STAFF)
async def export_quotation_route(
    quotation_id: int,
    export_format: Literal["pdf", "excel"],
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await export_quotation(db, quotation_id, export_format)
