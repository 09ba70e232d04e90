# rental_quotes/routers/users.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_quotes.core.db import get_db
from rental_quotes.schemas.response_schemas import ListResponse, MessageResponse, ResponseMessage
from rental_quotes.schemas.user_schemas import Role, UserCreate, UserOut, UserUpdate
from rental_quotes.services.user_service import (
    create_user, list_users, get_user_by_id, update_user, delete_user
)
from rental_quotes.utils.check_roles import ADMIN, require_role
from rental_quotes.utils.get_user import get_current_user
from rental_quotes.utils.pagination import PaginationParams

router = APIRouter(prefix="/users", tags=["Users"])


# ---------------------------
# CREATE USER
# ---------------------------
@router.post("/", response_model=ResponseMessage[UserOut], status_code=status.HTTP_201_CREATED)
@require_role([ADMIN])
async def create_user_route(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_user(db, user_data, _user)


# ---------------------------
# LIST USERS
# ---------------------------
@router.get("/", response_model=ListResponse[UserOut])
@require_role([ADMIN])
async def list_users_route(
    params: PaginationParams = Depends(),
    role: Optional[Role] = Query(None),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_users(db, params, role=role, is_active=is_active)


# ---------------------------
# GET SINGLE USER
# ---------------------------
@router.get("/{user_id}", response_model=ResponseMessage[UserOut])
@require_role([ADMIN])
async def get_user_route(user_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    target_user = await get_user_by_id(db, user_id)
    return {"status": True, "message": "User retrieved successfully", "data": UserOut.model_validate(target_user)}


# ---------------------------
# UPDATE USER
# ---------------------------
@router.put("/{user_id}", response_model=ResponseMessage[UserOut])
@require_role([ADMIN])
async def update_user_route(
    user_id: int,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_user(db, user_id, user_data, _user)


# ---------------------------
# DEACTIVATE USER
# ---------------------------
@router.delete("/{user_id}", response_model=MessageResponse)
@require_role([ADMIN])
async def delete_user_route(user_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await delete_user(db, user_id, _user)
