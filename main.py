import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.config import get_settings
from taskboard.infrastructure.database import engine, initialize_database
from taskboard.interfaces.api.routes import register_routes

logger = logging.getLogger("taskboard")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa la base de datos al arrancar y libera los recursos al cerrar."""

    initialize_database()
    logger.info("Taskboard started")
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = get_settings()
    logger.setLevel(settings.log_level.upper())

    app = FastAPI(title="Taskboard", lifespan=lifespan)

    # Autoriza peticiones desde el cliente web configurado.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
