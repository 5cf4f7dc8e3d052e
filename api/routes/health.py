from fastapi import APIRouter

from schemas.common import HealthCheckResponse

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    return HealthCheckResponse()
