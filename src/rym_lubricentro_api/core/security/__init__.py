"""Authentication and authorization"""

from rym_lubricentro_api.core.security.auth import JWTAuth, JWTSecretManager, TokenData
from rym_lubricentro_api.core.security.authentication import (
    AuthenticatedUser,
    TokenAuthenticationBackend,
)
from rym_lubricentro_api.core.security.authorization import (
    AuthorizationRequirement,
    allow_anonymous,
    authorize,
    get_authorization_requirement,
)

__all__ = [
    "JWTAuth",
    "JWTSecretManager",
    "TokenData",
    "AuthenticatedUser",
    "TokenAuthenticationBackend",
    "AuthorizationRequirement",
    "allow_anonymous",
    "authorize",
    "get_authorization_requirement",
]
