# rental_quotes/utils/check_roles.py
import logging
from functools import wraps
from typing import Callable, Iterable

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

ADMIN = "admin"
USER = "user"
STAFF = [ADMIN, USER]


def require_role(roles: Iterable[str]):
    """
    Route decorator limiting access to the given roles. The wrapped route must
    take the authenticated user as ``_user=Depends(get_current_user)``.
    """
    allowed = {r.lower() for r in roles}

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, _user, **kwargs):
            if _user is None:
                raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not authenticated")
            if (_user.role or "").lower() not in allowed:
                logger.info("User '%s' (%s) denied access to %s", _user.username, _user.role, func.__name__)
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
            return await func(*args, _user=_user, **kwargs)
        return wrapper
    return decorator
