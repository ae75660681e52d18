from rym_lubricentro_api.application.services.current_user import CurrentUserService

__all__ = ["CurrentUserService"]
