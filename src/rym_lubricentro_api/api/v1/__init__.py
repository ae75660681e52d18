from fastapi import APIRouter

from rym_lubricentro_api.api.v1.auth import router as auth_router
from rym_lubricentro_api.api.v1.base import router as base_router

v1_router = APIRouter()

v1_router.include_router(base_router)
v1_router.include_router(auth_router, prefix="/auth", tags=["Autenticación"])

__all__ = ["v1_router"]
