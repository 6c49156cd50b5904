from fastapi import FastAPI

from .notifications import router as notifications_router
from .programming import router as programming_router
from .session import router as session_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(notifications_router)
    app.include_router(programming_router)
    app.include_router(session_router)
