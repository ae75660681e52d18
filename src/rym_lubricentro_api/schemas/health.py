"""Health check schemas"""

from rym_lubricentro_api.core.serialization import DateOnly
from rym_lubricentro_api.schemas.common import ApiModel


class HealthResponse(ApiModel):
    status: str
    service_name: str
    version: str
    environment: str
    server_date: DateOnly
