"""Bearer token authentication backend.

The backend only establishes who the caller is. A missing or invalid token
leaves the request anonymous; rejecting it is up to the authorization stage.
"""

from fastapi import HTTPException
from loguru import logger
from starlette.authentication import AuthCredentials, AuthenticationBackend, BaseUser
from starlette.requests import HTTPConnection

from rym_lubricentro_api.core.security.auth import JWTAuth, TokenData

AUTHENTICATED_SCOPE = "authenticated"


class AuthenticatedUser(BaseUser):
    def __init__(self, token_data: TokenData):
        self.token_data = token_data

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.token_data.username

    @property
    def identity(self) -> str:
        return self.token_data.user_id

    @property
    def roles(self) -> list[str]:
        return list(self.token_data.roles)

    def is_in_role(self, role: str) -> bool:
        return role in self.token_data.roles


class TokenAuthenticationBackend(AuthenticationBackend):
    scheme = "Bearer"

    def __init__(self, jwt_auth: JWTAuth):
        self.jwt_auth = jwt_auth

    async def authenticate(self, conn: HTTPConnection):
        auth_header = conn.headers.get("Authorization")
        if not auth_header:
            return None

        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != self.scheme.lower() or not token.strip():
            return None

        try:
            token_data = self.jwt_auth.verify_token(token.strip())
        except HTTPException as e:
            logger.debug(f"Token rechazado en {conn.url.path}: {e.detail}")
            return None

        scopes = [AUTHENTICATED_SCOPE, *token_data.roles]
        return AuthCredentials(scopes), AuthenticatedUser(token_data)
