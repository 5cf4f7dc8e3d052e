"""
Password hashing and bearer token helpers.

Token helpers take the ``Settings`` of the running application so that an
app built around its own service context signs with its own secret.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from core.config import Settings
from core.exceptions import AuthError

# Configure the hashing algorithm
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(settings: Settings, user_id: int, email: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    payload = {"sub": str(user_id), "email": email, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(settings: Settings, token: str) -> Dict[str, Any]:
    """Decode a bearer token, raising ``AuthError`` when it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        raise AuthError("Invalid or expired token")

    if not payload.get("sub"):
        raise AuthError("Invalid or expired token")
    return payload
