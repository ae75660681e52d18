"""CORS policies.

Policies are registered by name at startup and looked up by name when the
pipeline is assembled.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from rym_lubricentro_api.core.exceptions import StartupError

ANY = "*"


class CorsPolicyNotFoundError(StartupError, KeyError):
    def __init__(self, name: str):
        super().__init__(f"Política CORS no registrada: {name}")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class CorsPolicy:
    """Rules applied to cross-origin requests."""

    origins: tuple[str, ...] = ()
    allow_any_header: bool = False
    allow_any_method: bool = False
    allow_credentials: bool = False
    headers: tuple[str, ...] = ()
    methods: tuple[str, ...] = ("GET",)
    exposed_headers: tuple[str, ...] = ()
    max_age: int = 600

    def __post_init__(self):
        object.__setattr__(self, "origins", tuple(o.rstrip("/") for o in self.origins))
        if self.allow_credentials and ANY in self.origins:
            raise ValueError("Una política CORS con credenciales no puede permitir cualquier origen ('*')")

    @property
    def allowed_methods(self) -> list[str]:
        return [ANY] if self.allow_any_method else list(self.methods)

    @property
    def allowed_headers(self) -> list[str]:
        return [ANY] if self.allow_any_header else list(self.headers)

    def is_origin_allowed(self, origin: str) -> bool:
        return ANY in self.origins or origin.rstrip("/") in self.origins

    def middleware_options(self) -> dict:
        """Keyword arguments for Starlette's ``CORSMiddleware``."""
        return {
            "allow_origins": list(self.origins),
            "allow_methods": self.allowed_methods,
            "allow_headers": self.allowed_headers,
            "allow_credentials": self.allow_credentials,
            "expose_headers": list(self.exposed_headers),
            "max_age": self.max_age,
        }


class CorsOptionsFrozenError(StartupError):
    def __init__(self, name: str):
        super().__init__(f"No se puede registrar la política CORS '{name}': las opciones ya están cerradas")
        self.name = name


class CorsOptions:
    """Named CORS policies known to the application.

    Policies are added while services are configured; ``freeze()`` closes the
    registry before it is shared with the pipeline.
    """

    def __init__(self):
        self._policies: dict[str, CorsPolicy] = {}
        self._frozen = False

    @property
    def policies(self) -> Mapping[str, CorsPolicy]:
        return MappingProxyType(self._policies)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "CorsOptions":
        self._frozen = True
        return self

    def add_policy(self, name: str, policy: CorsPolicy) -> None:
        if self._frozen:
            raise CorsOptionsFrozenError(name)
        if name in self.policies:
            raise ValueError(f"La política CORS '{name}' ya está registrada")
        self._policies[name] = policy

    def get_policy(self, name: str) -> CorsPolicy:
        try:
            return self._policies[name]
        except KeyError:
            raise CorsPolicyNotFoundError(name) from None
