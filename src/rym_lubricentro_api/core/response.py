"""Unified response helpers"""

from enum import IntEnum

from rym_lubricentro_api.schemas.common import BaseResponse


class ResponseCode(IntEnum):
    SUCCESS = 200
    CREATED = 201
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    SERVER_ERROR = 500


class Messages:
    """Standard response messages"""

    OPERATION_SUCCESS = "Operación exitosa"
    QUERY_SUCCESS = "Consulta exitosa"
    UNAUTHORIZED = "No autenticado o sesión expirada"
    FORBIDDEN = "Permisos insuficientes"
    NOT_FOUND = "Recurso no encontrado"
    SERVER_ERROR = "Error interno del servidor"


def success(data=None, message=Messages.OPERATION_SUCCESS, code=ResponseCode.SUCCESS):
    """Build a success response"""
    return BaseResponse(success=True, code=int(code), message=message, data=data)
