"""
Dependency injection utilities for API endpoints.
"""

import secrets
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.context import ServiceContext
from core.database import get_db
from core.exceptions import AuthError
from models.user import User
from services.authentication_service import get_user_for_token
from services.media_service import MediaService
from services.push_service import PushService
from services.subscription import ActiveSubscription, require_chosen_subscription

bearer_scheme = HTTPBearer(auto_error=False)


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context


def get_push_service(context: ServiceContext = Depends(get_context)) -> PushService:
    return context.push_service


def get_media_service(context: ServiceContext = Depends(get_context)) -> MediaService:
    return context.media_service


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    context: ServiceContext = Depends(get_context),
) -> User:
    """Resolve the household admin from ``Authorization: Bearer <token>``."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthError("Missing Authorization: Bearer <token>")
    return await get_user_for_token(db, credentials.credentials, context.settings)


async def require_api_key(request: Request, context: ServiceContext = Depends(get_context)) -> None:
    """Gate for device and platform routes: ``x-api-key`` must match ``API_KEY``."""
    expected = context.settings.API_KEY
    provided = request.headers.get("x-api-key")
    if not expected or not provided or not secrets.compare_digest(provided.encode(), expected.encode()):
        raise AuthError("Unauthorized")


async def require_subscription(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ActiveSubscription:
    return await require_chosen_subscription(db, current_user.id)
