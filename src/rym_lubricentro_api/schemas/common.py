"""Common response schemas"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from rym_lubricentro_api.core.serialization import DEFAULT_JSON_OPTIONS

T = TypeVar('T')


class ApiModel(BaseModel):
    """Base model for every wire payload; names follow the JSON naming policy."""

    model_config = ConfigDict(
        alias_generator=DEFAULT_JSON_OPTIONS.property_naming_policy.convert,
        populate_by_name=True,
    )


class BaseResponse(ApiModel, Generic[T]):
    success: bool = Field(default=True)
    code: int = Field(default=200)
    message: str = Field(default="")
    data: T | None = Field(default=None)
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorDetail(ApiModel):
    field: str
    message: str


class ErrorResponse(ApiModel):
    success: bool = Field(default=False)
    code: int
    message: str
    errors: list[ErrorDetail] | None = Field(default=None)
    error_code: str | None = Field(default=None)
    timestamp: datetime = Field(default_factory=datetime.now)
