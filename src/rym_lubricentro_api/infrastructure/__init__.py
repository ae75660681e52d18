"""Infrastructure layer: configuration, authentication and the pipeline middleware."""

from rym_lubricentro_api.infrastructure.dependency_injection import add_infraestructura

__all__ = ["add_infraestructura"]
