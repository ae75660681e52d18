"""API documentation descriptor and OpenAPI document generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute

from rym_lubricentro_api.core.config import Settings


@dataclass(frozen=True)
class ApiContact:
    name: str
    email: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {k: v for k, v in (("name", self.name), ("email", self.email), ("url", self.url)) if v}


@dataclass(frozen=True)
class SecurityScheme:
    """Bearer token sent in the ``Authorization`` header."""

    name: str = "Bearer"
    type: str = "apiKey"
    header_name: str = "Authorization"
    location: str = "header"
    scheme: str = "Bearer"
    bearer_format: str = "JWT"
    description: str = "Introduce el token en el formato: Bearer {token}"

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type,
            "description": self.description,
            "name": self.header_name,
            "in": self.location,
            "scheme": self.scheme,
            "bearerFormat": self.bearer_format,
        }


@dataclass(frozen=True)
class ApiDocumentationDescriptor:
    document_name: str
    title: str
    version: str
    description: str = ""
    contact: ApiContact | None = None
    security_scheme: SecurityScheme = field(default_factory=SecurityScheme)
    global_security_requirement: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApiDocumentationDescriptor":
        return cls(
            document_name="v1",
            title=settings.APP_NAME,
            version=settings.APP_VERSION,
            description=settings.APP_DESCRIPTION,
            contact=ApiContact(name=settings.CONTACT_NAME, email=settings.CONTACT_EMAIL),
        )

    @property
    def openapi_url(self) -> str:
        return f"/swagger/{self.document_name}/swagger.json"


class EndpointMetadataExplorer:
    """Lists the API routes that take part in documentation."""

    def api_routes(self, routes: Sequence[BaseRoute]) -> list[APIRoute]:
        return [r for r in routes if isinstance(r, APIRoute) and r.include_in_schema]


def build_openapi_schema(
    descriptor: ApiDocumentationDescriptor,
    routes: Sequence[BaseRoute],
    explorer: EndpointMetadataExplorer | None = None,
) -> dict[str, Any]:
    """Generate the OpenAPI document described by ``descriptor``."""
    explorer = explorer or EndpointMetadataExplorer()
    schema = get_openapi(
        title=descriptor.title,
        version=descriptor.version,
        description=descriptor.description,
        routes=explorer.api_routes(routes),
        contact=descriptor.contact.to_dict() if descriptor.contact else None,
    )

    scheme = descriptor.security_scheme
    components = schema.setdefault("components", {})
    components.setdefault("securitySchemes", {})[scheme.name] = scheme.to_dict()
    if descriptor.global_security_requirement:
        schema["security"] = [{scheme.name: []}]
    return schema
