# rental_quotes/utils/get_user.py
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_quotes.core.db import get_db
from rental_quotes.core.security import decode_token
from rental_quotes.models.user_models import User

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers=BEARER_HEADERS)


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("No token provided, authorization denied")
    raw_token = authorization[len("Bearer "):].strip()
    if not raw_token:
        raise _unauthorized("No token provided, authorization denied")

    try:
        payload = decode_token(raw_token, request.app.state.settings)
    except ValueError:
        raise _unauthorized("Token is invalid or expired")

    subject = payload.get("sub")
    token_version = payload.get("token_version")
    if payload.get("type") != "access" or not subject or token_version is None:
        raise _unauthorized("Invalid token payload")

    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")

    user = await db.get(User, user_id)
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("Your account has been deactivated. Please contact administrator.")
    if user.token_version != token_version:
        raise _unauthorized("Token invalidated. Please log in again.")

    # plain value only: the ORM object may be expired by the time middleware reads it
    request.state.username = user.username
    return user
