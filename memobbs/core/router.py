# memobbs/core/router.py
"""
Module for registering routes in the FastAPI application.
"""

from fastapi import APIRouter, FastAPI

from memobbs.auth.router import router as auth_router
from memobbs.core import clock
from memobbs.logging.router import router as log_router
from memobbs.memos.router import router as memo_router
from memobbs.resources.router import router as resource_router

health_router = APIRouter(tags=["Health"])


@health_router.get("/health")
def health_check() -> dict:
    return {"status": "ok", "timestamp": clock.now_iso()}


def register_routes(app: FastAPI) -> None:
    """
    Registers all the routes for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance.
    """
    app.include_router(auth_router, prefix="/api")
    app.include_router(memo_router, prefix="/api")
    app.include_router(resource_router, prefix="/api")
    app.include_router(log_router, prefix="/api")
    app.include_router(health_router, prefix="/api")
