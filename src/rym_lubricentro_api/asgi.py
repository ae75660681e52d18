"""ASGI entrypoint.

Keeps module imports free of side effects: the FastAPI app is only created here.
"""

from rym_lubricentro_api.bootstrap import create_app

app = create_app()
