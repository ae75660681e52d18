"""Composition root.

``Startup`` registers the application services and declares the request
pipeline. The host calls ``configure_services`` first and ``configure`` once.
"""

from dataclasses import dataclass

from loguru import logger
from starlette.responses import JSONResponse

from rym_lubricentro_api.application import add_aplicacion
from rym_lubricentro_api.bootstrap.environment import HostEnvironment
from rym_lubricentro_api.bootstrap.pipeline import ApplicationBuilder
from rym_lubricentro_api.bootstrap.routes import register_routes
from rym_lubricentro_api.core.config import Settings
from rym_lubricentro_api.core.cors import CorsOptions, CorsPolicy
from rym_lubricentro_api.core.di import ServiceCollection
from rym_lubricentro_api.core.http_context import HttpContextAccessor
from rym_lubricentro_api.core.openapi import ApiDocumentationDescriptor, EndpointMetadataExplorer
from rym_lubricentro_api.core.serialization import DEFAULT_JSON_OPTIONS, JsonOptions, make_json_response_class
from rym_lubricentro_api.infrastructure import add_infraestructura


@dataclass(frozen=True)
class ControllerOptions:
    """Controller dispatch settings; carries the JSON options of the responses."""

    json_options: JsonOptions
    response_class: type[JSONResponse]


class Startup:
    def __init__(self, configuration: Settings):
        self.configuration = configuration

    @property
    def cors_policy_name(self) -> str:
        return self.configuration.CORS_POLICY_NAME

    def configure_services(self, services: ServiceCollection) -> None:
        """Register services into the container."""
        logger.info("[1/7] Registrando controladores con opciones JSON")
        json_options = DEFAULT_JSON_OPTIONS
        services.add_singleton(JsonOptions, json_options)
        services.add_singleton(
            ControllerOptions,
            ControllerOptions(json_options=json_options, response_class=make_json_response_class(json_options)),
        )

        logger.info("[2/7] Registrando explorador de endpoints")
        services.add_singleton(EndpointMetadataExplorer, EndpointMetadataExplorer())

        logger.info("[3/7] Registrando documentación de la API")
        services.add_singleton(ApiDocumentationDescriptor, ApiDocumentationDescriptor.from_settings(self.configuration))

        logger.info("[4/7] Registrando infraestructura")
        add_infraestructura(services, self.configuration)

        logger.info("[5/7] Registrando servicios de aplicación")
        add_aplicacion(services)

        logger.info("[6/7] Registrando acceso al contexto HTTP")
        services.try_add_singleton(HttpContextAccessor, HttpContextAccessor())

        logger.info("[7/7] Registrando política CORS")
        cors_options = CorsOptions()
        cors_options.add_policy(
            self.cors_policy_name,
            CorsPolicy(
                origins=tuple(self.configuration.CORS_ORIGINS),
                allow_any_header=True,
                allow_any_method=True,
                allow_credentials=True,
            ),
        )
        services.add_singleton(CorsOptions, cors_options.freeze())

    def configure(self, app: ApplicationBuilder, env: HostEnvironment) -> None:
        """Declare the request pipeline."""
        if env.is_development():
            app.use_swagger()
            app.use_swagger_ui()

        app.use_static_files()

        app.use_cors(self.cors_policy_name)

        app.use_routing()

        app.use_authentication()
        app.use_authorization()

        app.use_endpoints(register_routes)
