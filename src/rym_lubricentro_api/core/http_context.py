"""Access to the current request from code that is not request-scoped."""

from contextvars import ContextVar, Token

from starlette.requests import Request

_current_request: ContextVar[Request | None] = ContextVar("current_request", default=None)


class HttpContextAccessor:
    """Reads the request being handled by the current task, if any."""

    @property
    def request(self) -> Request | None:
        return _current_request.get()

    def set(self, request: Request | None) -> Token:
        return _current_request.set(request)

    def reset(self, token: Token) -> None:
        _current_request.reset(token)
