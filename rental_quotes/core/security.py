# rental_quotes/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from rental_quotes.core.config import Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_HASH_LENGTH = 60


def is_password_hash(value: Optional[str]) -> bool:
    """bcrypt output is always 60 characters with a ``$2`` identifier."""
    return bool(value) and len(value) == BCRYPT_HASH_LENGTH and value.startswith("$2")


def hash_password(password: str) -> str:
    if is_password_hash(password):
        return password
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not is_password_hash(hashed):
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(
    data: Dict[str, Any],
    token_version: int,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": "access",
        "token_version": token_version,
    })
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise ValueError("Invalid or expired token")
