"""Application lifecycle management."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from loguru import logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and release the container on shutdown."""
    environment = app.state.environment
    logger.info("=" * 50)
    logger.info(f"{app.title} {app.version} iniciado")
    logger.info(f"Entorno: {environment.environment_name}")
    logger.info(f"Pipeline: {' -> '.join(app.state.pipeline)}")
    if environment.is_development():
        logger.info("Documentación disponible en /swagger")
    logger.info("=" * 50)
    try:
        yield
    finally:
        logger.info("Cerrando servicios")
        app.state.services.close()
        logger.info("Aplicación detenida")
