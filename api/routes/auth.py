from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_context
from core.context import ServiceContext
from core.database import get_db
from schemas.auth import Credentials, UserRead
from services.authentication_service import login, signup

router = APIRouter()


@router.post("/signup")
async def signup_route(
    body: Credentials,
    db: AsyncSession = Depends(get_db),
    context: ServiceContext = Depends(get_context),
):
    user, token = await signup(db, body.email, body.password, context.settings)
    return {"ok": True, "token": token, "user": UserRead.model_validate(user)}


@router.post("/login")
async def login_route(
    body: Credentials,
    db: AsyncSession = Depends(get_db),
    context: ServiceContext = Depends(get_context),
):
    user, token = await login(db, body.email, body.password, context.settings)
    return {"ok": True, "token": token, "user": {"id": user.id, "email": user.email}}
