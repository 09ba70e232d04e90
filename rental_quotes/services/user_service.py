# rental_quotes/services/user_service.py
import logging

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from rental_quotes.core.security import hash_password
from rental_quotes.models.user_models import User
from rental_quotes.schemas.user_schemas import UserCreate, UserOut, UserUpdate
from rental_quotes.utils.pagination import PaginationParams, apply_sorting, paginate

logger = logging.getLogger(__name__)

USER_SORT_COLUMNS = {
    "id": User.id,
    "username": User.username,
    "email": User.email,
    "role": User.role,
    "created_at": User.created_at,
    "last_login": User.last_login,
}


async def _ensure_username_free(db: AsyncSession, username: str, exclude_id: int = None):
    query = select(User).where(User.username == username)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    if (await db.execute(query)).scalars().first():
        raise HTTPException(status_code=400, detail="Username already exists")


# ---------------------------
# CREATE USER
# ---------------------------
async def create_user(db: AsyncSession, user_data: UserCreate, current_user) -> dict:
    await _ensure_username_free(db, user_data.username)

    new_user = User(
        username=user_data.username,
        password_hash=hash_password(user_data.password),
        email=user_data.email,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        role=user_data.role,
        is_active=user_data.is_active,
    )
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info("%s created user '%s' (ID: %s)", current_user.username, new_user.username, new_user.id)
    return {"status": True, "message": f"User '{new_user.username}' created successfully", "data": UserOut.model_validate(new_user)}


# ---------------------------
# LIST USERS
# ---------------------------
async def list_users(
    db: AsyncSession,
    params: PaginationParams,
    role: str = None,
    is_active: bool = None,
) -> dict:
    query = select(User)
    if params.search:
        pattern = f"%{params.search}%"
        query = query.where(or_(
            User.username.ilike(pattern),
            User.email.ilike(pattern),
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
        ))
    if role:
        query = query.where(User.role == role)
    if is_active is not None:
        query = query.where(User.is_active == is_active)

    query = apply_sorting(query, params, USER_SORT_COLUMNS, default_sort="username")
    users, meta = await paginate(db, query, params)
    return {
        "status": True,
        "message": "Users retrieved successfully",
        "data": [UserOut.model_validate(u) for u in users],
        "meta": meta,
    }


# ---------------------------
# GET USER BY ID
# ---------------------------
async def get_user_by_id(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ---------------------------
# UPDATE USER
# ---------------------------
async def update_user(db: AsyncSession, user_id: int, user_data: UserUpdate, current_user) -> dict:
    target_user = await get_user_by_id(db, user_id)
    changes = []

    updates = user_data.model_dump(exclude_unset=True)

    if updates.get("username") and updates["username"] != target_user.username:
        await _ensure_username_free(db, updates["username"], exclude_id=user_id)

    password = updates.pop("password", None)
    if password:
        target_user.password_hash = hash_password(password)
        # outstanding tokens die with the old password
        target_user.token_version += 1
        changes.append("password")

    for key, value in updates.items():
        if value is None and key in ("username", "role", "is_active"):
            continue
        if getattr(target_user, key) != value:
            changes.append(key)
            setattr(target_user, key, value)

    await db.commit()
    await db.refresh(target_user)

    if changes:
        logger.info("%s updated user '%s': %s", current_user.username, target_user.username, ", ".join(changes))
    return {"status": True, "message": f"User '{target_user.username}' updated successfully", "data": UserOut.model_validate(target_user)}


# ---------------------------
# DELETE USER (deactivate)
# ---------------------------
async def delete_user(db: AsyncSession, user_id: int, current_user) -> dict:
    target_user = await get_user_by_id(db, user_id)
    if target_user.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")

    target_user.is_active = False
    target_user.token_version += 1
    await db.commit()

    logger.info("%s deactivated user '%s'", current_user.username, target_user.username)
    return {"status": True, "message": f"User '{target_user.username}' deactivated successfully"}
