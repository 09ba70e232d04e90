# rental_quotes/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rental_quotes.core.config import Settings, get_settings
from rental_quotes.core.db import get_db
from rental_quotes.schemas.response_schemas import MessageResponse, ResponseMessage
from rental_quotes.schemas.user_schemas import TokenData, UserLogin, UserOut
from rental_quotes.services.auth_service import login, logout_user
from rental_quotes.utils.get_user import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=ResponseMessage[TokenData])
async def login_route(
    data: UserLogin,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await login(db, data.username, data.password, settings)


@router.get("/me", response_model=ResponseMessage[UserOut])
async def me_route(current_user=Depends(get_current_user)):
    return {"status": True, "message": "Current user", "data": UserOut.model_validate(current_user)}


@router.post("/logout", response_model=MessageResponse)
async def logout_route(db: AsyncSession = Depends(get_db), current_user=Depends(get_current_user)):
    """
    Invalidates every token issued to the user so far.
    """
    return await logout_user(db, current_user)
