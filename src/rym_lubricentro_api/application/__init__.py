"""Application layer: use-case services consumed by the controllers."""

from loguru import logger

from rym_lubricentro_api.application.services import CurrentUserService
from rym_lubricentro_api.core.di import ServiceCollection
from rym_lubricentro_api.core.http_context import HttpContextAccessor


def add_aplicacion(services: ServiceCollection) -> ServiceCollection:
    """Register application services."""
    services.add_scoped(
        CurrentUserService,
        lambda s: CurrentUserService(s.get_required_service(HttpContextAccessor)),
    )
    logger.debug("Servicios de aplicación registrados")
    return services


__all__ = ["add_aplicacion", "CurrentUserService"]
