from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_context, get_current_user
from core.context import ServiceContext
from core.database import get_db
from schemas.admin import AdminStats
from services.admin_stats import collect_stats

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/stats", response_model=AdminStats, response_model_by_alias=True)
async def platform_stats(
    db: AsyncSession = Depends(get_db),
    context: ServiceContext = Depends(get_context),
):
    return await collect_stats(db, context.settings.TIMEZONE)
