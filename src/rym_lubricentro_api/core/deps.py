"""
Dependency injection for FastAPI routes

Resolves services from the request service scope opened by the host.
"""

from typing import Any

from fastapi import Depends, Request

from rym_lubricentro_api.core.di import ServiceResolutionError, ServiceScope

SERVICES_SCOPE_KEY = "services"


def get_service_scope(request: Request) -> ServiceScope:
    """Return the service scope of the current request"""
    service_scope = request.scope.get(SERVICES_SCOPE_KEY)
    if service_scope is None:
        raise ServiceResolutionError("La solicitud no tiene un scope de servicios")
    return service_scope


def inject(contract: Any):
    """Build a dependency that resolves ``contract`` for the current request.

    Usage::

        CurrentUser = Annotated[CurrentUserService, inject(CurrentUserService)]
    """

    async def _resolve(request: Request):
        return get_service_scope(request).get_required_service(contract)

    _resolve.__name__ = f"inject_{getattr(contract, '__name__', 'service')}"
    return Depends(_resolve)
