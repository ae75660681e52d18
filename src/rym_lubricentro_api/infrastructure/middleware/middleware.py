"""Middleware components

Every stage is a plain ASGI middleware: it receives the request and the next
application in the chain, and either answers itself or delegates.
"""
import os
from typing import Any, Sequence

from fastapi.openapi.docs import get_swagger_ui_html
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import BaseRoute, Host, Match, Mount, Route, Router, WebSocketRoute
from starlette.requests import Request
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.websockets import WebSocketClose

from rym_lubricentro_api.core.deps import SERVICES_SCOPE_KEY
from rym_lubricentro_api.core.di import ServiceProvider
from rym_lubricentro_api.core.exceptions import create_error_response
from rym_lubricentro_api.core.http_context import HttpContextAccessor
from rym_lubricentro_api.core.openapi import (
    ApiDocumentationDescriptor,
    EndpointMetadataExplorer,
    build_openapi_schema,
)
from rym_lubricentro_api.core.security.authorization import get_authorization_requirement
from rym_lubricentro_api.core.serialization import JsonNamingPolicy, JsonOptions, make_json_response_class

ENDPOINT_SCOPE_KEY = "endpoint"
ROUTE_SCOPE_KEY = "route"

RESOLVABLE_ROUTE_TYPES = (Route, WebSocketRoute, Mount, Host)

# The document keeps its own names
DocumentJSONResponse = make_json_response_class(JsonOptions(property_naming_policy=JsonNamingPolicy.NONE))


class HttpContextMiddleware:
    """Hosting middleware: exposes the current request and opens the request service scope."""

    def __init__(self, app: ASGIApp, provider: ServiceProvider, accessor: HttpContextAccessor):
        self.app = app
        self.provider = provider
        self.accessor = accessor

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        token = self.accessor.set(Request(scope) if scope["type"] == "http" else None)
        try:
            with self.provider.create_scope() as service_scope:
                scope[SERVICES_SCOPE_KEY] = service_scope
                await self.app(scope, receive, send)
        finally:
            self.accessor.reset(token)


class OpenApiDocumentMiddleware:
    """Serves the generated OpenAPI document."""

    def __init__(
        self,
        app: ASGIApp,
        router: Router,
        descriptor: ApiDocumentationDescriptor,
        explorer: EndpointMetadataExplorer | None = None,
    ):
        self.app = app
        self.router = router
        self.descriptor = descriptor
        self.explorer = explorer or EndpointMetadataExplorer()
        self._schema: dict[str, Any] | None = None

    def schema(self) -> dict[str, Any]:
        if self._schema is None:
            self._schema = build_openapi_schema(self.descriptor, self.router.routes, self.explorer)
        return self._schema

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] in ("GET", "HEAD") and scope["path"] == self.descriptor.openapi_url:
            response = DocumentJSONResponse(self.schema())
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


class SwaggerUIMiddleware:
    """Serves the interactive documentation explorer."""

    ROUTE_PREFIX = "/swagger"

    def __init__(self, app: ASGIApp, descriptor: ApiDocumentationDescriptor):
        self.app = app
        self.descriptor = descriptor
        self.paths = {self.ROUTE_PREFIX, f"{self.ROUTE_PREFIX}/", f"{self.ROUTE_PREFIX}/index.html"}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] in ("GET", "HEAD") and scope["path"] in self.paths:
            response = get_swagger_ui_html(
                openapi_url=self.descriptor.openapi_url,
                title=f"{self.descriptor.title} - Swagger UI",
            )
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


class StaticFilesMiddleware:
    """Serves files from the static directory; unknown paths continue down the chain."""

    def __init__(self, app: ASGIApp, directory: str):
        self.app = app
        self.directory = directory
        self.files = StaticFiles(directory=directory, check_dir=False)
        if not os.path.isdir(directory):
            logger.warning(f"Directorio de archivos estáticos no encontrado: {directory}")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in ("GET", "HEAD") or not os.path.isdir(self.directory):
            await self.app(scope, receive, send)
            return

        try:
            response = await self.files.get_response(self.files.get_path(scope), scope)
        except StarletteHTTPException as e:
            if e.status_code == 404:
                await self.app(scope, receive, send)
                return
            response = create_error_response(e.status_code, str(e.detail), headers=e.headers)
        await response(scope, receive, send)


def unresolvable_routes(routes: Sequence[BaseRoute]) -> list[BaseRoute]:
    """Return the routes whose endpoint cannot be resolved ahead of the router."""
    found: list[BaseRoute] = []
    for route in routes:
        if not isinstance(route, RESOLVABLE_ROUTE_TYPES):
            found.append(route)
        elif isinstance(route, (Mount, Host)):
            found.extend(unresolvable_routes(route.routes))
    return found


class EndpointRoutingMiddleware:
    """Resolves the endpoint a request targets without executing it."""

    def __init__(self, app: ASGIApp, router: Router):
        self.app = app
        self.router = router

    def resolve(self, scope: Scope, routes: Sequence[BaseRoute] | None = None):
        """Return the matched route and its child scope.

        Mounted routers are searched the way the router dispatches them: the
        first full match wins, and a mount that matches is final. A partial
        match (path matches, method does not) yields the route with no
        endpoint, so the router answers 405 without authorization.
        """
        partial = None
        for route in self.router.routes if routes is None else routes:
            match, child_scope = route.matches(scope)
            if match is Match.FULL:
                if isinstance(route, (Mount, Host)) and route.routes:
                    return self.resolve({**scope, **child_scope}, route.routes)
                return route, child_scope
            if match is Match.PARTIAL and partial is None:
                partial = route
        return partial, {}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in ("http", "websocket"):
            route, child_scope = self.resolve(scope)
            scope[ROUTE_SCOPE_KEY] = route
            scope[ENDPOINT_SCOPE_KEY] = child_scope.get("endpoint")
        await self.app(scope, receive, send)


class AuthorizationMiddleware:
    """Enforces the authorization requirement of the resolved endpoint."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def _reject(self, scope: Scope, receive: Receive, send: Send, status_code: int, message: str) -> None:
        if scope["type"] == "websocket":
            await WebSocketClose(code=1008, reason=message)(scope, receive, send)
            return
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        error_code = "UNAUTHORIZED" if status_code == 401 else "FORBIDDEN"
        response = create_error_response(status_code, message, error_code=error_code, headers=headers)
        await response(scope, receive, send)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        requirement = get_authorization_requirement(scope.get(ENDPOINT_SCOPE_KEY))
        if requirement is None:
            await self.app(scope, receive, send)
            return

        user = scope.get("user")
        if user is None or not user.is_authenticated:
            logger.debug(f"Solicitud anónima rechazada: {scope['path']}")
            await self._reject(scope, receive, send, 401, "No autenticado o sesión expirada")
            return

        if not requirement.is_satisfied_by_roles(getattr(user, "roles", ())):
            logger.debug(f"Acceso denegado a {user.display_name}: {scope['path']}")
            await self._reject(scope, receive, send, 403, "Permisos insuficientes")
            return

        await self.app(scope, receive, send)
