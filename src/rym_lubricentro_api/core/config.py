"""Application configuration.

Settings are read from environment variables and the project ``.env`` file.
The instance is read-only once the application has been built.
"""

import os
from functools import cached_property
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT = "Development"
STAGING = "Staging"
PRODUCTION = "Production"


def _find_project_root(start: Path | None = None) -> Path:
    """Return the directory holding ``.env`` (or the top-most ``pyproject.toml``).

    An installed package has neither above it, so the working directory is
    used instead of a directory inside the environment.
    """
    current = (start or Path(__file__)).resolve()

    for parent in current.parents:
        if (parent / ".env").exists():
            return parent

    root = None
    for parent in current.parents:
        if (parent / "pyproject.toml").exists():
            root = parent

    if root:
        return root

    return Path.cwd()


class Settings(BaseSettings):
    """Application settings"""

    # === Server ===
    SERVER_HOST: str = Field(default="0.0.0.0")
    SERVER_PORT: int = Field(default=5000)
    SERVER_RELOAD: bool = Field(default=False)
    ENVIRONMENT: str = Field(default=PRODUCTION)

    # === Logging ===
    LOG_LEVEL: str = Field(default="INFO")
    LOG_TO_FILE: bool = Field(default=True)
    LOG_FILE: str = Field(default="")

    # === Application info ===
    APP_NAME: str = "RyM Lubricentro API"
    APP_VERSION: str = "v1"
    APP_DESCRIPTION: str = "Comprehensive RESTful API for mechanic shop service management system"
    CONTACT_NAME: str = "RyM Lubricentro"
    CONTACT_EMAIL: str = "support@lubricentrorym.com"

    # === JWT ===
    JWT_SECRET_KEY: str = Field(default="")
    JWT_SECRET_FILE: str = Field(default="")
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = Field(default="")
    JWT_AUDIENCE: str = Field(default="")
    JWT_ROLES_CLAIM: str = "roles"

    # === CORS ===
    CORS_POLICY_NAME: str = "PermitirFrontend"
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:3001",
            "https://bacosta30762.github.io",
        ]
    )

    # === Static files ===
    STATIC_FILES_DIR: str = Field(default="wwwroot")

    BASE_DIR: str = str(_find_project_root())

    @field_validator("ENVIRONMENT")
    @classmethod
    def normalize_environment(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ENVIRONMENT no puede estar vacío")
        return value

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == DEVELOPMENT.lower()

    @cached_property
    def data_dir(self) -> str:
        return os.path.join(self.BASE_DIR, "data")

    @cached_property
    def LOG_FILE_PATH(self) -> str:
        if self.LOG_FILE:
            return self.LOG_FILE
        return os.path.join(self.data_dir, "logs", "app.log")

    @cached_property
    def static_files_path(self) -> str:
        if os.path.isabs(self.STATIC_FILES_DIR):
            return self.STATIC_FILES_DIR
        return os.path.join(self.BASE_DIR, self.STATIC_FILES_DIR)

    @cached_property
    def jwt_secret_path(self) -> str:
        if self.JWT_SECRET_FILE:
            return self.JWT_SECRET_FILE
        return os.path.join(self.data_dir, ".jwt_secret")

    model_config = SettingsConfigDict(
        env_file=str(_find_project_root() / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
