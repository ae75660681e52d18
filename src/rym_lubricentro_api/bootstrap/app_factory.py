"""Application factory module.

Provides the create_app() factory function for creating FastAPI application instances.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from rym_lubricentro_api.bootstrap.environment import HostEnvironment
from rym_lubricentro_api.bootstrap.lifespan import lifespan
from rym_lubricentro_api.bootstrap.pipeline import ApplicationBuilder
from rym_lubricentro_api.bootstrap.startup import ControllerOptions, Startup
from rym_lubricentro_api.core.config import Settings, settings as default_settings
from rym_lubricentro_api.core.di import ServiceCollection, ServiceResolutionError
from rym_lubricentro_api.core.exceptions import (
    BusinessException,
    StartupError,
    business_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from rym_lubricentro_api.core.http_context import HttpContextAccessor
from rym_lubricentro_api.core.logging import setup_logging
from rym_lubricentro_api.infrastructure.middleware import HttpContextMiddleware


def create_app(settings: Settings | None = None, startup_class: type[Startup] = Startup) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: configuration handle; the process settings when omitted.
        startup_class: composition root to use.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = settings or default_settings
    setup_logging(settings)

    try:
        startup = startup_class(settings)

        services = ServiceCollection()
        startup.configure_services(services)
        provider = services.build_provider()

        environment = HostEnvironment.from_settings(settings)
        controller_options = provider.get_required_service(ControllerOptions)

        # Documentation is served by the pipeline, never by FastAPI's own routes
        app = FastAPI(
            title=settings.APP_NAME,
            version=settings.APP_VERSION,
            description=settings.APP_DESCRIPTION,
            openapi_url=None,
            docs_url=None,
            redoc_url=None,
            default_response_class=controller_options.response_class,
            lifespan=lifespan,
        )
        app.state.services = provider
        app.state.environment = environment

        builder = ApplicationBuilder(app, provider, environment)
        startup.configure(builder, environment)
        builder.build()
        app.state.pipeline = builder.describe()

        app.add_middleware(
            HttpContextMiddleware,
            provider=provider,
            accessor=provider.get_required_service(HttpContextAccessor),
        )
    except (StartupError, ServiceResolutionError) as e:
        logger.error(f"La aplicación no pudo iniciarse: {e}")
        raise

    # Register exception handlers
    app.add_exception_handler(BusinessException, business_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app
