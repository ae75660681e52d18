"""
JSON serialization options

Controls how request and response bodies are written on the wire:
- property names follow a naming policy (camelCase by default); it applies
  to every object key, so dataclasses and plain models rendered as dicts get
  the same names as ``ApiModel`` aliases
- date-only values go through ``DateOnlyJsonConverter``
- non-ASCII characters are emitted as-is (relaxed escaping)

ujson is used for rendering, as elsewhere in the project.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Protocol, runtime_checkable

import ujson
from loguru import logger
from pydantic import BaseModel, BeforeValidator, PlainSerializer
from pydantic.alias_generators import to_camel, to_snake
from starlette.responses import JSONResponse


class SerializationError(Exception):
    """Raised when a payload cannot be rendered as JSON"""


class JsonNamingPolicy(str, Enum):
    """Naming policy applied to model property names"""

    CAMEL_CASE = "camelCase"
    SNAKE_CASE = "snake_case"
    NONE = "none"

    def convert(self, name: str) -> str:
        if self is JsonNamingPolicy.CAMEL_CASE:
            # Names without underscores are already camelCase
            return to_camel(name) if "_" in name.strip("_") else name
        if self is JsonNamingPolicy.SNAKE_CASE:
            return to_snake(name)
        return name


@runtime_checkable
class JsonConverter(Protocol):
    """A converter reads and writes one Python type as a JSON string"""

    def can_convert(self, value: Any) -> bool: ...

    def write(self, value: Any) -> str: ...

    def read(self, value: Any) -> Any: ...


class DateOnlyJsonConverter:
    """Writes and reads date-only values as ``YYYY-MM-DD``.

    ``datetime`` is a subclass of ``date`` but carries a time part, so it is
    left to the default serializer.
    """

    FORMAT = "%Y-%m-%d"

    def can_convert(self, value: Any) -> bool:
        return isinstance(value, date) and not isinstance(value, datetime)

    def write(self, value: date) -> str:
        return value.strftime(self.FORMAT)

    def read(self, value: Any) -> date:
        if isinstance(value, datetime):
            raise ValueError("se esperaba una fecha sin hora")
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            raise ValueError(f"formato de fecha inválido: {value!r}")
        try:
            return datetime.strptime(value, self.FORMAT).date()
        except ValueError as e:
            raise ValueError(f"formato de fecha inválido, se esperaba YYYY-MM-DD: {value!r}") from e


@dataclass(frozen=True)
class JsonOptions:
    """Process-wide JSON options, built once at startup."""

    property_naming_policy: JsonNamingPolicy = JsonNamingPolicy.CAMEL_CASE
    converters: tuple = field(default_factory=lambda: (DateOnlyJsonConverter(),))
    ensure_ascii: bool = False
    escape_forward_slashes: bool = False

    def find_converter(self, value: Any) -> JsonConverter | None:
        for converter in self.converters:
            if converter.can_convert(value):
                return converter
        return None


DEFAULT_JSON_OPTIONS = JsonOptions()

_date_only_converter = DateOnlyJsonConverter()

DateOnly = Annotated[
    date,
    BeforeValidator(_date_only_converter.read),
    PlainSerializer(_date_only_converter.write, return_type=str, when_used="json"),
]


class JsonSerializer:
    """Renders payloads with ujson according to a ``JsonOptions``"""

    def __init__(self, options: JsonOptions = DEFAULT_JSON_OPTIONS):
        self.options = options

    def _default(self, obj: Any) -> Any:
        converter = self.options.find_converter(obj)
        if converter is not None:
            return converter.write(obj)
        if isinstance(obj, BaseModel):
            return self.apply_naming_policy(obj.model_dump(mode="json", by_alias=True))
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        raise TypeError(f"{type(obj).__name__} no es serializable a JSON")

    def apply_naming_policy(self, obj: Any) -> Any:
        """Rename the keys of every object in ``obj`` with the naming policy."""
        policy = self.options.property_naming_policy
        if policy is JsonNamingPolicy.NONE:
            return obj
        if isinstance(obj, dict):
            return {
                policy.convert(key) if isinstance(key, str) else key: self.apply_naming_policy(value)
                for key, value in obj.items()
            }
        if isinstance(obj, (list, tuple)):
            return [self.apply_naming_policy(item) for item in obj]
        return obj

    def dumps(self, obj: Any) -> str:
        try:
            return ujson.dumps(
                self.apply_naming_policy(obj),
                ensure_ascii=self.options.ensure_ascii,
                escape_forward_slashes=self.options.escape_forward_slashes,
                default=self._default,
            )
        except (TypeError, ValueError, OverflowError) as e:
            obj_type = type(obj).__name__
            logger.error(f"Falló la serialización JSON: tipo {obj_type}, error: {e}")
            raise SerializationError(f"No se puede serializar el tipo {obj_type}: {e}") from e

    def loads(self, data: str | bytes) -> Any:
        try:
            return ujson.loads(data)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"JSON inválido: {e}") from e


def make_json_response_class(options: JsonOptions = DEFAULT_JSON_OPTIONS) -> type[JSONResponse]:
    """Build a ``JSONResponse`` subclass bound to the given options."""
    serializer = JsonSerializer(options)

    class ApiJSONResponse(JSONResponse):
        media_type = "application/json"

        def render(self, content: Any) -> bytes:
            return serializer.dumps(content).encode("utf-8")

    return ApiJSONResponse


ApiJSONResponse = make_json_response_class(DEFAULT_JSON_OPTIONS)
