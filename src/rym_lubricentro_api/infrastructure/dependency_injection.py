"""Infrastructure service registration."""

from loguru import logger

from rym_lubricentro_api.core.config import Settings
from rym_lubricentro_api.core.di import ServiceCollection
from rym_lubricentro_api.core.security import JWTAuth, JWTSecretManager, TokenAuthenticationBackend


def add_infraestructura(services: ServiceCollection, configuration: Settings) -> ServiceCollection:
    """Register configuration and authentication infrastructure.

    Args:
        services: collection being populated by the composition root.
        configuration: application settings.
    """
    if not isinstance(configuration, Settings):
        raise TypeError(f"Se esperaba Settings, se recibió {type(configuration).__name__}")

    services.add_singleton(Settings, configuration)
    services.add_singleton(JWTSecretManager, lambda p: JWTSecretManager(p.get_required_service(Settings)))
    services.add_singleton(
        JWTAuth,
        lambda p: JWTAuth(p.get_required_service(Settings), p.get_required_service(JWTSecretManager)),
    )
    services.add_singleton(
        TokenAuthenticationBackend,
        lambda p: TokenAuthenticationBackend(p.get_required_service(JWTAuth)),
    )

    logger.debug("Infraestructura registrada")
    return services
