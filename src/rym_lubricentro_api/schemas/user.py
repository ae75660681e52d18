"""User schemas"""

from datetime import datetime

from pydantic import Field

from rym_lubricentro_api.schemas.common import ApiModel


class CurrentUserResponse(ApiModel):
    user_id: str
    user_name: str
    roles: list[str] = Field(default_factory=list)
    token_expires_at: datetime
