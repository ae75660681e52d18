"""Current user service"""

from rym_lubricentro_api.core.exceptions import UnauthorizedException
from rym_lubricentro_api.core.http_context import HttpContextAccessor
from rym_lubricentro_api.schemas.user import CurrentUserResponse


class CurrentUserService:
    """Reads the caller identity of the request being handled."""

    def __init__(self, accessor: HttpContextAccessor):
        self.accessor = accessor

    @property
    def _user(self):
        request = self.accessor.request
        if request is None or "user" not in request.scope:
            return None
        return request.user

    @property
    def is_authenticated(self) -> bool:
        user = self._user
        return bool(user and user.is_authenticated)

    @property
    def user_id(self) -> str | None:
        return self._user.identity if self.is_authenticated else None

    @property
    def roles(self) -> list[str]:
        return self._user.roles if self.is_authenticated else []

    def get_current_user(self) -> CurrentUserResponse:
        if not self.is_authenticated:
            raise UnauthorizedException()
        token_data = self._user.token_data
        return CurrentUserResponse(
            user_id=token_data.user_id,
            user_name=token_data.username,
            roles=token_data.roles,
            token_expires_at=token_data.exp,
        )
