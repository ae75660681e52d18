"""Base endpoints"""
from datetime import date
from typing import Annotated

from fastapi import APIRouter

from rym_lubricentro_api.core.config import Settings
from rym_lubricentro_api.core.deps import inject
from rym_lubricentro_api.core.response import Messages, success
from rym_lubricentro_api.core.security import allow_anonymous
from rym_lubricentro_api.schemas import HealthResponse
from rym_lubricentro_api.schemas.common import BaseResponse

router = APIRouter()

AppSettings = Annotated[Settings, inject(Settings)]


@router.get(
    "/health",
    response_model=BaseResponse[HealthResponse],
    summary="Estado del servicio",
    tags=["Base"],
)
@allow_anonymous
async def health_check(settings: AppSettings):
    payload = HealthResponse(
        status="healthy",
        service_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        server_date=date.today(),
    )
    return success(payload, message=Messages.QUERY_SUCCESS)
