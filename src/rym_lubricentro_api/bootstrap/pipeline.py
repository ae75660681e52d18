"""Request pipeline builder.

Stages are appended in the order they are declared and every stage wraps all
the stages declared after it. The ordering rules the stages depend on are
checked while the pipeline is being declared, so a misconfigured pipeline
fails at startup instead of on the first request.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from fastapi import FastAPI
from loguru import logger
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware

from rym_lubricentro_api.bootstrap.environment import HostEnvironment
from rym_lubricentro_api.core.config import Settings
from rym_lubricentro_api.core.cors import CorsOptions, CorsPolicyNotFoundError
from rym_lubricentro_api.core.di import ServiceProvider
from rym_lubricentro_api.core.exceptions import PipelineConfigurationError
from rym_lubricentro_api.core.openapi import ApiDocumentationDescriptor, EndpointMetadataExplorer
from rym_lubricentro_api.core.security import TokenAuthenticationBackend
from rym_lubricentro_api.infrastructure.middleware import (
    AuthorizationMiddleware,
    EndpointRoutingMiddleware,
    OpenApiDocumentMiddleware,
    StaticFilesMiddleware,
    SwaggerUIMiddleware,
    unresolvable_routes,
)

SWAGGER = "swagger"
SWAGGER_UI = "swagger_ui"
STATIC_FILES = "static_files"
CORS = "cors"
ROUTING = "routing"
AUTHENTICATION = "authentication"
AUTHORIZATION = "authorization"
ENDPOINTS = "endpoints"


@dataclass(frozen=True)
class PipelineStage:
    name: str
    middleware_class: type
    options: dict[str, Any] = field(default_factory=dict)


class ApplicationBuilder:
    """Collects the pipeline stages of an application and installs them."""

    def __init__(self, app: FastAPI, application_services: ServiceProvider, environment: HostEnvironment):
        self.app = app
        self.application_services = application_services
        self.environment = environment
        self._stages: list[PipelineStage] = []
        self._endpoints_configured = False
        self._built = False

    @property
    def stages(self) -> tuple[PipelineStage, ...]:
        return tuple(self._stages)

    def _has(self, name: str) -> bool:
        return any(stage.name == name for stage in self._stages)

    def use(self, name: str, middleware_class: type, **options: Any) -> "ApplicationBuilder":
        """Append a stage to the pipeline."""
        if self._built:
            raise PipelineConfigurationError("El pipeline ya fue construido")
        if self._endpoints_configured:
            raise PipelineConfigurationError(f"'{name}' no puede agregarse después de los endpoints")
        if self._has(name):
            raise PipelineConfigurationError(f"La etapa '{name}' ya fue agregada")
        self._stages.append(PipelineStage(name, middleware_class, options))
        return self

    def use_swagger(self) -> "ApplicationBuilder":
        descriptor = self.application_services.get_required_service(ApiDocumentationDescriptor)
        explorer = self.application_services.get_service(EndpointMetadataExplorer)
        return self.use(
            SWAGGER,
            OpenApiDocumentMiddleware,
            router=self.app.router,
            descriptor=descriptor,
            explorer=explorer,
        )

    def use_swagger_ui(self) -> "ApplicationBuilder":
        descriptor = self.application_services.get_required_service(ApiDocumentationDescriptor)
        return self.use(SWAGGER_UI, SwaggerUIMiddleware, descriptor=descriptor)

    def use_static_files(self, directory: str | None = None) -> "ApplicationBuilder":
        if directory is None:
            directory = self.application_services.get_required_service(Settings).static_files_path
        return self.use(STATIC_FILES, StaticFilesMiddleware, directory=directory)

    def use_cors(self, policy_name: str) -> "ApplicationBuilder":
        cors_options = self.application_services.get_required_service(CorsOptions)
        try:
            policy = cors_options.get_policy(policy_name)
        except CorsPolicyNotFoundError as e:
            raise PipelineConfigurationError(str(e)) from e
        return self.use(CORS, CORSMiddleware, **policy.middleware_options())

    def use_routing(self) -> "ApplicationBuilder":
        return self.use(ROUTING, EndpointRoutingMiddleware, router=self.app.router)

    def use_authentication(self) -> "ApplicationBuilder":
        if self._has(AUTHORIZATION):
            raise PipelineConfigurationError("La autenticación debe agregarse antes que la autorización")
        backend = self.application_services.get_required_service(TokenAuthenticationBackend)
        return self.use(AUTHENTICATION, AuthenticationMiddleware, backend=backend)

    def use_authorization(self) -> "ApplicationBuilder":
        if not self._has(ROUTING):
            raise PipelineConfigurationError("La autorización requiere que el enrutamiento se agregue antes")
        return self.use(AUTHORIZATION, AuthorizationMiddleware)

    def use_endpoints(self, configure: Callable[[FastAPI], None]) -> "ApplicationBuilder":
        """Map the endpoints executed at the end of the pipeline."""
        if self._built:
            raise PipelineConfigurationError("El pipeline ya fue construido")
        if self._endpoints_configured:
            raise PipelineConfigurationError(f"La etapa '{ENDPOINTS}' ya fue agregada")
        if not self._has(ROUTING):
            raise PipelineConfigurationError("Los endpoints requieren que el enrutamiento se agregue antes")
        configure(self.app)
        self._endpoints_configured = True
        return self

    def describe(self) -> list[str]:
        names = [stage.name for stage in self._stages]
        if self._endpoints_configured:
            names.append(ENDPOINTS)
        return names

    def build(self) -> FastAPI:
        """Install the stages on the application, first declared outermost."""
        if self._built:
            raise PipelineConfigurationError("El pipeline ya fue construido")
        if not self._endpoints_configured:
            logger.warning("El pipeline no tiene endpoints configurados")
        if self._has(ROUTING):
            # Authorization reads the resolved endpoint, so every route must be resolvable
            unresolved = unresolvable_routes(self.app.router.routes)
            if unresolved:
                names = ", ".join(type(route).__name__ for route in unresolved)
                raise PipelineConfigurationError(f"Rutas que el enrutamiento no puede resolver: {names}")

        # add_middleware inserts at the front, so the first stage goes in last
        for stage in reversed(self._stages):
            self.app.add_middleware(stage.middleware_class, **stage.options)

        self._built = True
        logger.info(f"Pipeline: {' -> '.join(self.describe())}")
        return self.app
