# rental_quotes/services/quotation_service.py
import logging
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import lazyload

from rental_quotes.core.config import Settings
from rental_quotes.models.quotation_models import (
    Quotation,
    QuotationItem,
    QuotationSection,
    QuotationStatus,
)
from rental_quotes.schemas.quotation_schemas import (
    QuotationCreate,
    QuotationItemCreate,
    QuotationItemUpdate,
    QuotationOut,
    QuotationSectionCreate,
    QuotationSectionUpdate,
    QuotationSummaryOut,
    QuotationUpdate,
)
from rental_quotes.services.equipment_service import get_equipment_or_404
from rental_quotes.services.pricing import (
    compute_item_total,
    compute_quotation_totals,
    compute_section_subtotal,
    exceeds_money_limit,
    generate_quotation_number,
    MAX_MONEY,
    quotation_number_prefix,
)
from rental_quotes.utils.pagination import PaginationParams, apply_sorting, paginate

logger = logging.getLogger(__name__)

QUOTATION_SORT_COLUMNS = {
    "id": Quotation.id,
    "quotation_number": Quotation.quotation_number,
    "client_name": Quotation.client_name,
    "project_name": Quotation.project_name,
    "issue_date": Quotation.issue_date,
    "valid_until": Quotation.valid_until,
    "total": Quotation.total,
    "status": Quotation.status,
    "created_at": Quotation.created_at,
    "updated_at": Quotation.updated_at,
}


# --------------------------
# Lookups
# --------------------------
async def get_quotation_or_404(db: AsyncSession, quotation_id: int, lock: bool = False) -> Quotation:
    """
    With ``lock=True`` the quotation row is held FOR UPDATE until the
    session's transaction ends, serializing concurrent recomputes.
    """
    query = (
        select(Quotation)
        .where(Quotation.id == quotation_id)
        .execution_options(populate_existing=True)
    )
    if lock:
        query = query.with_for_update()
    quotation = (await db.execute(query)).scalars().first()
    if not quotation:
        raise HTTPException(status_code=404, detail="Quotation not found")
    return quotation


async def _get_section_or_404(db: AsyncSession, quotation_id: int, section_id: int) -> QuotationSection:
    result = await db.execute(
        select(QuotationSection).where(
            QuotationSection.id == section_id,
            QuotationSection.quotation_id == quotation_id,
        )
    )
    section = result.scalars().first()
    if not section:
        raise HTTPException(status_code=404, detail="Section not found")
    return section


async def _get_item_or_404(db: AsyncSession, quotation_id: int, item_id: int) -> QuotationItem:
    result = await db.execute(
        select(QuotationItem).where(
            QuotationItem.id == item_id,
            QuotationItem.quotation_id == quotation_id,
        )
    )
    item = result.scalars().first()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


def _check_amount(value, label: str):
    # reject before flushing, the column cannot hold it
    if exceeds_money_limit(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label} exceeds the maximum amount of {MAX_MONEY}",
        )
    return value


async def _quotation_response(db: AsyncSession, quotation_id: int, message: str) -> dict:
    # fresh graph: collections touched during the mutation are stale
    db.expunge_all()
    quotation = await get_quotation_or_404(db, quotation_id)
    return {"status": True, "message": message, "data": QuotationOut.model_validate(quotation)}


# --------------------------
# Aggregates
# --------------------------
async def next_quotation_number(db: AsyncSession, today: date) -> str:
    prefix = quotation_number_prefix(today)
    result = await db.execute(
        select(Quotation.quotation_number).where(Quotation.quotation_number.like(f"{prefix}%"))
    )
    return generate_quotation_number(result.scalars().all(), today)


async def recalculate_totals(db: AsyncSession, quotation: Quotation):
    """
    Re-derive item totals, section subtotals and the quotation's subtotal and
    total from what is currently persisted. Flushes pending changes first.
    """
    await db.flush()

    items = (await db.execute(
        select(QuotationItem).where(QuotationItem.quotation_id == quotation.id)
    )).scalars().all()
    sections = (await db.execute(
        select(QuotationSection)
        .options(lazyload(QuotationSection.items))
        .where(QuotationSection.quotation_id == quotation.id)
    )).scalars().all()

    by_section = defaultdict(list)
    for item in items:
        item.total = _check_amount(compute_item_total(item), f"Total of item '{item.item_name}'")
        if item.section_id is not None:
            by_section[item.section_id].append(item)

    for section in sections:
        section.subtotal = compute_section_subtotal(by_section.get(section.id, ()))

    totals = compute_quotation_totals(items, quotation.tax, quotation.discount)
    _check_amount(totals.subtotal, "Quotation subtotal")
    _check_amount(totals.total, "Quotation total")
    quotation.subtotal = totals.subtotal
    quotation.total = totals.total

    await db.flush()
    logger.debug(
        "Quotation %s recalculated: subtotal=%s tax=%s discount=%s total=%s",
        quotation.quotation_number, totals.subtotal, totals.tax_amount, totals.discount_amount, totals.total,
    )


async def _build_item(
    db: AsyncSession,
    quotation_id: int,
    section_id: Optional[int],
    data: QuotationItemCreate,
) -> QuotationItem:
    values = data.model_dump(exclude={"section_id"})

    if data.equipment_id is not None:
        equipment = await get_equipment_or_404(db, data.equipment_id)
        if not values.get("item_name"):
            values["item_name"] = equipment.name
        if values.get("price_per_day") is None:
            values["price_per_day"] = equipment.daily_rental_price

    item = QuotationItem(quotation_id=quotation_id, section_id=section_id, **values)
    item.total = _check_amount(compute_item_total(item), f"Total of item '{item.item_name}'")
    return item


async def _add_section_rows(db: AsyncSession, quotation_id: int, data: QuotationSectionCreate) -> QuotationSection:
    section = QuotationSection(
        quotation_id=quotation_id,
        name=data.name,
        date=data.date,
        description=data.description,
        is_active=data.is_active,
        subtotal=0,
    )
    db.add(section)
    await db.flush()

    for item_data in data.items:
        db.add(await _build_item(db, quotation_id, section.id, item_data))
    return section


# --------------------------
# CREATE QUOTATION
# --------------------------
async def create_quotation(db: AsyncSession, data: QuotationCreate, current_user, settings: Settings) -> dict:
    today = datetime.now(timezone.utc).date()
    header = data.model_dump(exclude={"sections", "items"})

    quotation = None
    for attempt in range(1, settings.quotation_number_retries + 1):
        number = await next_quotation_number(db, today)
        candidate = Quotation(quotation_number=number, subtotal=0, total=0, **header)
        try:
            # the savepoint claims the number; a clash only undoes this insert
            async with db.begin_nested():
                db.add(candidate)
        except IntegrityError:
            logger.warning(
                "Quotation number %s already taken (attempt %d/%d)",
                number, attempt, settings.quotation_number_retries,
            )
            continue
        quotation = candidate
        break

    if quotation is None:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not allocate a quotation number, please retry",
        )

    try:
        for section_data in data.sections:
            await _add_section_rows(db, quotation.id, section_data)
        for item_data in data.items:
            db.add(await _build_item(db, quotation.id, None, item_data))

        await recalculate_totals(db, quotation)
        await db.commit()
    except HTTPException:
        await db.rollback()
        raise

    logger.info("Quotation '%s' created by '%s'", quotation.quotation_number, current_user.username)
    return await _quotation_response(db, quotation.id, "Quotation created successfully")


# --------------------------
# LIST QUOTATIONS
# --------------------------
async def list_quotations(
    db: AsyncSession,
    params: PaginationParams,
    status_filter: Optional[QuotationStatus] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> dict:
    query = select(Quotation).options(lazyload(Quotation.sections), lazyload(Quotation.items))

    if params.search:
        pattern = f"%{params.search}%"
        query = query.where(or_(
            Quotation.quotation_number.ilike(pattern),
            Quotation.client_name.ilike(pattern),
            Quotation.project_name.ilike(pattern),
        ))
    if status_filter is not None:
        query = query.where(Quotation.status == status_filter)
    if from_date is not None:
        query = query.where(Quotation.issue_date >= from_date)
    if to_date is not None:
        query = query.where(Quotation.issue_date <= to_date)

    query = apply_sorting(query, params, QUOTATION_SORT_COLUMNS, default_sort="created_at", default_order="desc")
    quotations, meta = await paginate(db, query, params)
    return {
        "status": True,
        "message": "Quotations retrieved successfully",
        "data": [QuotationSummaryOut.model_validate(q) for q in quotations],
        "meta": meta,
    }


# --------------------------
# GET SINGLE QUOTATION
# --------------------------
async def get_quotation(db: AsyncSession, quotation_id: int) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id)
    return {"status": True, "message": "Quotation retrieved successfully", "data": QuotationOut.model_validate(quotation)}


# --------------------------
# UPDATE QUOTATION
# --------------------------
async def update_quotation(db: AsyncSession, quotation_id: int, data: QuotationUpdate, current_user) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)

    changes = []
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key in ("client_name", "issue_date", "tax", "discount"):
            continue
        if getattr(quotation, key) != value:
            changes.append(key)
            setattr(quotation, key, value)

    await recalculate_totals(db, quotation)
    await db.commit()

    logger.info("Quotation '%s' updated by '%s': %s",
                quotation.quotation_number, current_user.username, ", ".join(changes) or "no changes")
    return await _quotation_response(db, quotation_id, "Quotation updated successfully")


# --------------------------
# DELETE QUOTATION
# --------------------------
async def delete_quotation(db: AsyncSession, quotation_id: int, current_user) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)
    number = quotation.quotation_number

    await db.delete(quotation)
    await db.commit()

    logger.info("Quotation '%s' deleted by '%s'", number, current_user.username)
    return {"status": True, "message": "Quotation deleted successfully"}


# --------------------------
# UPDATE STATUS
# --------------------------
async def update_status(db: AsyncSession, quotation_id: int, new_status: QuotationStatus, current_user) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)
    old_status = quotation.status

    quotation.status = new_status
    await db.commit()

    logger.info("Quotation '%s' status %s -> %s by '%s'",
                quotation.quotation_number, old_status.value, new_status.value, current_user.username)
    return await _quotation_response(db, quotation_id, "Quotation status updated successfully")


# --------------------------
# ITEMS
# --------------------------
async def add_item(db: AsyncSession, quotation_id: int, data: QuotationItemCreate, current_user) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)

    if data.section_id is not None:
        await _get_section_or_404(db, quotation_id, data.section_id)

    item = await _build_item(db, quotation_id, data.section_id, data)
    db.add(item)

    await recalculate_totals(db, quotation)
    await db.commit()

    logger.info("Item '%s' added to quotation '%s' by '%s'",
                item.item_name, quotation.quotation_number, current_user.username)
    return await _quotation_response(db, quotation_id, "Item added successfully")


async def update_item(
    db: AsyncSession, quotation_id: int, item_id: int, data: QuotationItemUpdate, current_user
) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)
    item = await _get_item_or_404(db, quotation_id, item_id)
    updates = data.model_dump(exclude_unset=True)

    if "section_id" in updates and updates["section_id"] is not None:
        await _get_section_or_404(db, quotation_id, updates["section_id"])
    if updates.get("equipment_id") is not None:
        await get_equipment_or_404(db, updates["equipment_id"])

    for key, value in updates.items():
        # nullable links may be cleared, required columns may not
        if value is None and key not in ("section_id", "equipment_id", "description", "remarks", "unit"):
            continue
        setattr(item, key, value)

    item.total = _check_amount(compute_item_total(item), f"Total of item '{item.item_name}'")
    await recalculate_totals(db, quotation)
    await db.commit()

    logger.info("Item %s of quotation '%s' updated by '%s'",
                item_id, quotation.quotation_number, current_user.username)
    return await _quotation_response(db, quotation_id, "Item updated successfully")


async def remove_item(db: AsyncSession, quotation_id: int, item_id: int, current_user) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)
    item = await _get_item_or_404(db, quotation_id, item_id)

    await db.delete(item)
    await recalculate_totals(db, quotation)
    await db.commit()

    logger.info("Item %s removed from quotation '%s' by '%s'",
                item_id, quotation.quotation_number, current_user.username)
    return await _quotation_response(db, quotation_id, "Item removed successfully")


# --------------------------
# SECTIONS
# --------------------------
async def add_section(db: AsyncSession, quotation_id: int, data: QuotationSectionCreate, current_user) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)

    section = await _add_section_rows(db, quotation_id, data)
    await recalculate_totals(db, quotation)
    await db.commit()

    logger.info("Section '%s' added to quotation '%s' by '%s'",
                section.name, quotation.quotation_number, current_user.username)
    return await _quotation_response(db, quotation_id, "Section added successfully")


async def update_section(
    db: AsyncSession, quotation_id: int, section_id: int, data: QuotationSectionUpdate, current_user
) -> dict:
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)
    section = await _get_section_or_404(db, quotation_id, section_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key != "description":
            continue
        setattr(section, key, value)

    await db.commit()

    logger.info("Section %s of quotation '%s' updated by '%s'",
                section_id, quotation.quotation_number, current_user.username)
    return await _quotation_response(db, quotation_id, "Section updated successfully")


async def remove_section(db: AsyncSession, quotation_id: int, section_id: int, current_user) -> dict:
    """Deleting a section deletes the items inside it."""
    quotation = await get_quotation_or_404(db, quotation_id, lock=True)
    section = await _get_section_or_404(db, quotation_id, section_id)
    item_count = len(section.items)

    await db.delete(section)
    await recalculate_totals(db, quotation)
    await db.commit()

    logger.info("Section %s (%d item(s)) removed from quotation '%s' by '%s'",
                section_id, item_count, quotation.quotation_number, current_user.username)
    return await _quotation_response(db, quotation_id, "Section removed successfully")


# --------------------------
# EXPORT
# --------------------------
async def export_quotation(db: AsyncSession, quotation_id: int, export_format: str):
    await get_quotation_or_404(db, quotation_id)
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail=f"Export to {export_format} is not available",
    )
