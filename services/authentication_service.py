import logging
from typing import Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.exceptions import AuthError, ConflictError, ForbiddenError, ValidationError
from core.security import create_access_token, get_password_hash, verify_password, verify_token
from models.user import User
from repositories.user import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return str(email).lower().strip()


async def signup(
    db: AsyncSession, email: Optional[str], password: Optional[str], settings: Settings
) -> Tuple[User, str]:
    if not email or not password:
        raise ValidationError("email and password required")
    if len(str(password)) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} chars")

    email_clean = normalize_email(email)
    user_repo = UserRepository(db)
    try:
        user = await user_repo.create({
            "email": email_clean,
            "password_hash": get_password_hash(str(password)),
        })
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already exists")

    logger.info(f"Created household admin {user.id}")
    return user, create_access_token(settings, user.id, user.email)


async def login(
    db: AsyncSession, email: Optional[str], password: Optional[str], settings: Settings
) -> Tuple[User, str]:
    if not email or not password:
        raise ValidationError("email and password required")

    user = await UserRepository(db).get_by_email(normalize_email(email))
    if not user or not verify_password(str(password), user.password_hash):
        raise AuthError("Invalid credentials")
    if user.is_disabled:
        raise ForbiddenError("Account disabled")

    return user, create_access_token(settings, user.id, user.email)


async def get_user_for_token(db: AsyncSession, token: str, settings: Settings) -> User:
    payload = verify_token(settings, token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthError("Invalid or expired token")

    user = await UserRepository(db).get(user_id)
    if not user or user.is_disabled:
        raise AuthError("Invalid or expired token")
    return user
