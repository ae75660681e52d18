"""JWT authentication"""
import secrets
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import jwt
from loguru import logger
from pydantic import BaseModel, Field

from rym_lubricentro_api.core.config import Settings
from rym_lubricentro_api.core.exceptions import UnauthorizedException


def auth_error() -> UnauthorizedException:
    return UnauthorizedException("Credenciales inválidas")


def token_expired_error() -> UnauthorizedException:
    return UnauthorizedException("El token ha expirado")


class JWTSecretManager:
    """Resolves the signing secret: configured value first, then a local file."""

    def __init__(self, settings: Settings):
        self.configured_secret = settings.JWT_SECRET_KEY
        self.secret_file = Path(settings.jwt_secret_path)
        self._secret: Optional[str] = None

    def get_secret(self) -> str:
        if self._secret:
            return self._secret

        if self.configured_secret:
            self._secret = self.configured_secret
            return self._secret

        if self.secret_file.exists():
            try:
                if secret := self.secret_file.read_text().strip():
                    self._secret = secret
                    return self._secret
            except OSError as e:
                logger.warning(f"No se pudo leer la clave JWT: {e}")

        self._secret = secrets.token_hex(64)
        self._save_secret()
        return self._secret

    def _save_secret(self):
        try:
            self.secret_file.parent.mkdir(parents=True, exist_ok=True)
            self.secret_file.write_text(self._secret)
            self.secret_file.chmod(0o600)
        except OSError as e:
            logger.warning(f"No se pudo guardar la clave JWT: {e}")


class TokenData(BaseModel):
    """Claims read from a validated token"""
    user_id: str
    username: str
    roles: list[str] = Field(default_factory=list)
    exp: datetime


class JWTAuth:
    """Validates bearer tokens"""

    def __init__(self, settings: Settings, secret_manager: JWTSecretManager | None = None):
        self.algorithm = settings.JWT_ALGORITHM
        self.issuer = settings.JWT_ISSUER or None
        self.audience = settings.JWT_AUDIENCE or None
        self.roles_claim = settings.JWT_ROLES_CLAIM
        self.secret_manager = secret_manager or JWTSecretManager(settings)

    def _get_secret(self) -> str:
        return self.secret_manager.get_secret()

    def create_access_token(
        self,
        user_id: str,
        username: str,
        roles: list[str] | None = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create an access token"""
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
        payload = {
            "sub": str(user_id),
            "username": username,
            self.roles_claim: list(roles or []),
            "exp": expire,
        }
        if self.issuer:
            payload["iss"] = self.issuer
        if self.audience:
            payload["aud"] = self.audience
        return jwt.encode(payload, self._get_secret(), algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenData:
        """Validate a token and return its claims"""
        try:
            payload = jwt.decode(
                token,
                self._get_secret(),
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise token_expired_error()
        except jwt.InvalidTokenError:
            raise auth_error()

        user_id, username = payload.get("sub"), payload.get("username")
        if not user_id or not username:
            raise auth_error()

        roles = payload.get(self.roles_claim) or []
        if isinstance(roles, str):
            roles = [roles]
        return TokenData(
            user_id=str(user_id),
            username=username,
            roles=[str(r) for r in roles],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
