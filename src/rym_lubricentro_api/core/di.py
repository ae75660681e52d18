"""Dependency-injection container.

``ServiceCollection`` gathers registrations during startup; ``build_provider``
freezes it into a ``ServiceProvider`` that resolves services for the rest of
the process lifetime.

Registrations append. When a contract is registered more than once the last
registration wins on ``get_service``; ``get_services`` returns all of them in
registration order.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, TypeVar

from loguru import logger

from rym_lubricentro_api.core.exceptions import StartupError

T = TypeVar("T")

Factory = Callable[["ServiceProvider"], Any]


class ServiceLifetime(str, Enum):
    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


class ServiceResolutionError(Exception):
    """A service could not be resolved"""


class ServiceNotRegisteredError(ServiceResolutionError, LookupError):
    def __init__(self, contract: Any):
        super().__init__(f"Servicio no registrado: {_contract_name(contract)}")
        self.contract = contract


class ServiceCollectionFrozenError(StartupError):
    """Registrations are closed once the provider has been built"""


def _contract_name(contract: Any) -> str:
    return getattr(contract, "__qualname__", None) or str(contract)


@dataclass(frozen=True)
class ServiceDescriptor:
    """One registration: a contract, a lifetime and a factory or an instance."""

    contract: Any
    lifetime: ServiceLifetime
    factory: Factory | None = None
    instance: Any = None

    def __post_init__(self):
        if self.factory is None and self.instance is None:
            raise ValueError(f"{_contract_name(self.contract)}: se requiere factory o instance")
        if self.factory is not None and self.instance is not None:
            raise ValueError(f"{_contract_name(self.contract)}: factory e instance son excluyentes")
        if self.instance is not None and self.lifetime is not ServiceLifetime.SINGLETON:
            raise ValueError(f"{_contract_name(self.contract)}: una instancia solo puede ser singleton")


class ServiceCollection:
    """Mutable registry used by the composition root."""

    def __init__(self):
        self._descriptors: list[ServiceDescriptor] = []
        self._frozen = False

    def add(self, descriptor: ServiceDescriptor) -> "ServiceCollection":
        if self._frozen:
            raise ServiceCollectionFrozenError(
                f"No se puede registrar {_contract_name(descriptor.contract)}: el contenedor ya fue construido"
            )
        self._descriptors.append(descriptor)
        logger.debug(f"Servicio registrado: {_contract_name(descriptor.contract)} ({descriptor.lifetime.value})")
        return self

    def add_singleton(self, contract: Any, implementation: Any = None) -> "ServiceCollection":
        """Register a singleton.

        ``implementation`` may be an instance, a factory taking the provider,
        or omitted (the contract itself is instantiated without arguments).
        """
        if implementation is None:
            return self.add(ServiceDescriptor(contract, ServiceLifetime.SINGLETON, factory=_constructor(contract)))
        if callable(implementation) and not _is_instance_of(implementation, contract):
            return self.add(ServiceDescriptor(contract, ServiceLifetime.SINGLETON, factory=implementation))
        return self.add(ServiceDescriptor(contract, ServiceLifetime.SINGLETON, instance=implementation))

    def add_scoped(self, contract: Any, factory: Factory | None = None) -> "ServiceCollection":
        return self.add(ServiceDescriptor(contract, ServiceLifetime.SCOPED, factory=factory or _constructor(contract)))

    def add_transient(self, contract: Any, factory: Factory | None = None) -> "ServiceCollection":
        return self.add(
            ServiceDescriptor(contract, ServiceLifetime.TRANSIENT, factory=factory or _constructor(contract))
        )

    def try_add_singleton(self, contract: Any, implementation: Any = None) -> "ServiceCollection":
        """Register a singleton only when the contract is not registered yet."""
        if self.contains(contract):
            return self
        return self.add_singleton(contract, implementation)

    def contains(self, contract: Any) -> bool:
        return any(d.contract is contract for d in self._descriptors)

    @property
    def descriptors(self) -> tuple[ServiceDescriptor, ...]:
        return tuple(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(self._descriptors)

    def build_provider(self) -> "ServiceProvider":
        self._frozen = True
        return ServiceProvider(self._descriptors)


def _constructor(contract: Any) -> Factory:
    if not callable(contract):
        raise ValueError(f"{_contract_name(contract)} no es instanciable; indique una factory")
    return lambda provider: contract()


def _is_instance_of(value: Any, contract: Any) -> bool:
    return isinstance(contract, type) and isinstance(value, contract)


class ServiceProvider:
    """Resolves registered services. Singletons are shared by all scopes."""

    def __init__(self, descriptors: list[ServiceDescriptor]):
        self._descriptors = list(descriptors)
        self._singletons: dict[int, Any] = {}
        self._lock = threading.RLock()

    def _find(self, contract: Any) -> list[tuple[int, ServiceDescriptor]]:
        return [(i, d) for i, d in enumerate(self._descriptors) if d.contract is contract]

    def _create(self, index: int, descriptor: ServiceDescriptor, scope: "ServiceScope | None") -> Any:
        if descriptor.lifetime is ServiceLifetime.SINGLETON:
            if descriptor.instance is not None:
                return descriptor.instance
            with self._lock:
                if index not in self._singletons:
                    self._singletons[index] = descriptor.factory(self)
                return self._singletons[index]

        if descriptor.lifetime is ServiceLifetime.SCOPED:
            if scope is None:
                raise ServiceResolutionError(
                    f"{_contract_name(descriptor.contract)} es scoped y no puede resolverse fuera de un scope"
                )
            return scope._get_or_create(index, descriptor)

        return descriptor.factory(scope or self)

    def get_service(self, contract: type[T] | Any, _scope: "ServiceScope | None" = None) -> T | None:
        matches = self._find(contract)
        if not matches:
            return None
        index, descriptor = matches[-1]
        return self._create(index, descriptor, _scope)

    def get_required_service(self, contract: type[T] | Any, _scope: "ServiceScope | None" = None) -> T:
        matches = self._find(contract)
        if not matches:
            raise ServiceNotRegisteredError(contract)
        index, descriptor = matches[-1]
        return self._create(index, descriptor, _scope)

    def get_services(self, contract: type[T] | Any, _scope: "ServiceScope | None" = None) -> list[T]:
        return [self._create(i, d, _scope) for i, d in self._find(contract)]

    def create_scope(self) -> "ServiceScope":
        return ServiceScope(self)

    def close(self) -> None:
        """Close every created singleton that exposes ``close()``."""
        with self._lock:
            instances = list(self._singletons.values())
            self._singletons.clear()
        for instance in reversed(instances):
            _close(instance)


def _close(instance: Any) -> None:
    close = getattr(instance, "close", None)
    if callable(close):
        try:
            close()
        except Exception as e:
            logger.error(f"Error al liberar {type(instance).__name__}: {e}")


class ServiceScope:
    """A resolution scope; one is opened per request."""

    def __init__(self, provider: ServiceProvider):
        self.provider = provider
        self._instances: dict[int, Any] = {}
        self._closed = False

    def _get_or_create(self, index: int, descriptor: ServiceDescriptor) -> Any:
        if self._closed:
            raise ServiceResolutionError("El scope ya fue cerrado")
        if index not in self._instances:
            self._instances[index] = descriptor.factory(self)
        return self._instances[index]

    def get_service(self, contract: type[T] | Any) -> T | None:
        return self.provider.get_service(contract, _scope=self)

    def get_required_service(self, contract: type[T] | Any) -> T:
        return self.provider.get_required_service(contract, _scope=self)

    def get_services(self, contract: type[T] | Any) -> list[T]:
        return self.provider.get_services(contract, _scope=self)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for instance in reversed(list(self._instances.values())):
            _close(instance)
        self._instances.clear()

    def __enter__(self) -> "ServiceScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
