"""Bootstrap module for application initialization.

This module provides:
- Application factory (create_app)
- Composition root (Startup)
- Pipeline builder (ApplicationBuilder)
- Lifecycle management (lifespan)
"""

from rym_lubricentro_api.bootstrap.app_factory import create_app
from rym_lubricentro_api.bootstrap.environment import HostEnvironment
from rym_lubricentro_api.bootstrap.lifespan import lifespan
from rym_lubricentro_api.bootstrap.pipeline import ApplicationBuilder
from rym_lubricentro_api.bootstrap.routes import register_routes
from rym_lubricentro_api.bootstrap.startup import Startup

__all__ = [
    "create_app",
    "HostEnvironment",
    "lifespan",
    "ApplicationBuilder",
    "register_routes",
    "Startup",
]
