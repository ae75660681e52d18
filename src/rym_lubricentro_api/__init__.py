"""RyM Lubricentro web API."""

__all__ = ["create_app"]


def __getattr__(name: str):
    if name == "create_app":
        from rym_lubricentro_api.bootstrap import create_app

        globals()[name] = create_app
        return create_app
    raise AttributeError(f"module 'rym_lubricentro_api' has no attribute '{name}'")
