# rental_quotes/services/auth_service.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from rental_quotes.core.config import Settings
from rental_quotes.core.security import create_access_token, verify_password
from rental_quotes.models.user_models import User
from rental_quotes.schemas.user_schemas import TokenData, UserOut

logger = logging.getLogger(__name__)


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt for '%s'", username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Your account has been deactivated. Please contact administrator.",
        )
    return user


async def login(db: AsyncSession, username: str, password: str, settings: Settings) -> dict:
    user = await authenticate_user(db, username, password)

    token = create_access_token(
        {"sub": str(user.id), "username": user.username, "role": user.role},
        token_version=user.token_version,
        settings=settings,
    )

    user.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)

    logger.info("User '%s' logged in", user.username)
    return {
        "status": True,
        "message": "Login successful",
        "data": TokenData(token=token, user=UserOut.model_validate(user)),
    }


async def logout_user(db: AsyncSession, user: User) -> dict:
    """Bumping token_version invalidates every token issued so far."""
    user.token_version += 1
    await db.commit()
    logger.info("User '%s' logged out", user.username)
    return {"status": True, "message": "Logged out successfully"}
