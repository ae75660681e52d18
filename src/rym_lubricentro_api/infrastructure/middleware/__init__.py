"""Middleware infrastructure"""

from rym_lubricentro_api.infrastructure.middleware.middleware import (
    AuthorizationMiddleware,
    EndpointRoutingMiddleware,
    HttpContextMiddleware,
    OpenApiDocumentMiddleware,
    StaticFilesMiddleware,
    SwaggerUIMiddleware,
    unresolvable_routes,
)

__all__ = [
    "AuthorizationMiddleware",
    "EndpointRoutingMiddleware",
    "HttpContextMiddleware",
    "OpenApiDocumentMiddleware",
    "StaticFilesMiddleware",
    "SwaggerUIMiddleware",
    "unresolvable_routes",
]
