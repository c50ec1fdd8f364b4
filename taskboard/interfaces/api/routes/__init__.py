from fastapi import FastAPI

from .admin import router as admin_router
from .auth import router as auth_router
from .live import router as live_router
from .realtime import router as realtime_router
from .todos import router as todos_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(auth_router)
    app.include_router(todos_router)
    app.include_router(admin_router)
    app.include_router(realtime_router)
    app.include_router(live_router)
