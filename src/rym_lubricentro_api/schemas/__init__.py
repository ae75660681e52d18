from rym_lubricentro_api.schemas.common import ApiModel, BaseResponse, ErrorDetail, ErrorResponse
from rym_lubricentro_api.schemas.health import HealthResponse
from rym_lubricentro_api.schemas.user import CurrentUserResponse

__all__ = [
    "ApiModel",
    "BaseResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "CurrentUserResponse",
]
