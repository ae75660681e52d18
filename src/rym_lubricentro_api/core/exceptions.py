"""
Exceptions and exception handlers

Startup errors abort the process; request errors are rendered as the unified
``ErrorResponse`` body by the handlers registered in the app factory.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from rym_lubricentro_api.core.serialization import ApiJSONResponse
from rym_lubricentro_api.schemas.common import ErrorDetail, ErrorResponse


class StartupError(Exception):
    """Base class for errors that prevent the application from starting"""


class PipelineConfigurationError(StartupError):
    """The middleware pipeline was assembled in an invalid order"""


class BusinessException(HTTPException):
    """Base business exception"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str | None = None,
        errors: list | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.errors = errors or []


class UnauthorizedException(BusinessException):
    def __init__(self, detail: str = "No autenticado o sesión expirada"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(BusinessException):
    def __init__(self, detail: str = "Permisos insuficientes"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN",
        )


def create_error_response(
    status_code: int,
    message: str,
    errors: list[dict[str, Any]] | list[ErrorDetail] | None = None,
    error_code: str | None = None,
    headers: dict[str, str] | None = None,
) -> ApiJSONResponse:
    """Build the unified error response"""
    error_details: list[ErrorDetail] = []
    if errors:
        for err in errors:
            if isinstance(err, dict):
                error_details.append(
                    ErrorDetail(
                        field=err.get("field", ""),
                        message=err.get("message", str(err)),
                    )
                )
            elif isinstance(err, ErrorDetail):
                error_details.append(err)

    resp = ErrorResponse(
        success=False,
        code=status_code,
        message=message,
        errors=error_details,
        error_code=error_code,
    )
    content = resp.model_dump(mode="json", by_alias=True, exclude_none=True)
    return ApiJSONResponse(status_code=status_code, content=content, headers=headers)


async def business_exception_handler(request, exc: BusinessException) -> ApiJSONResponse:
    """Handle business exceptions"""
    return create_error_response(
        status_code=exc.status_code,
        message=exc.detail,
        errors=getattr(exc, "errors", None),
        error_code=getattr(exc, "error_code", None),
        headers=getattr(exc, "headers", None),
    )


async def http_exception_handler(request, exc: StarletteHTTPException) -> ApiJSONResponse:
    """Handle HTTP exceptions, including the router's 404 and 405"""
    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request, exc) -> ApiJSONResponse:
    """Handle request validation errors"""
    errors: list[dict[str, Any]] = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", []))
        errors.append(
            {
                "field": field,
                "message": error.get("msg", "Validación fallida"),
            }
        )
    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message="Los parámetros de la solicitud no son válidos",
        errors=errors,
    )


async def general_exception_handler(request, exc: Exception) -> ApiJSONResponse:
    """Handle uncaught exceptions"""
    logger.exception("Excepción no controlada: {}", exc)
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Error interno del servidor",
    )
