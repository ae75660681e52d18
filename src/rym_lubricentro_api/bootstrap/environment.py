"""Hosting environment."""

from dataclasses import dataclass

from rym_lubricentro_api.core.config import DEVELOPMENT, PRODUCTION, STAGING, Settings


@dataclass(frozen=True)
class HostEnvironment:
    environment_name: str
    application_name: str
    content_root_path: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "HostEnvironment":
        return cls(
            environment_name=settings.ENVIRONMENT,
            application_name=settings.APP_NAME,
            content_root_path=settings.BASE_DIR,
        )

    def is_environment(self, name: str) -> bool:
        return self.environment_name.lower() == name.lower()

    def is_development(self) -> bool:
        return self.is_environment(DEVELOPMENT)

    def is_staging(self) -> bool:
        return self.is_environment(STAGING)

    def is_production(self) -> bool:
        return self.is_environment(PRODUCTION)
