"""FastAPI application factory for the memo board."""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from memobbs import __version__
from memobbs.auth.dependencies import RENEWAL_HEADER
from memobbs.auth.service import AuthService
from memobbs.auth.tokens import TokenManager
from memobbs.core.config import Settings
from memobbs.core.database import create_db_engine, create_session_factory, init_db
from memobbs.core.router import register_routes
from memobbs.logging.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
    response_validation_exception_handler,
)
from memobbs.logging.middleware import LoggingMiddleware
from memobbs.logging.recorder import RequestLogRecorder
from memobbs.logging.setup import configure_logging
from memobbs.resources.storage import UPLOADS_URL_PATH, ResourceStore, public_base_url

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    Raises ``ConfigurationError`` for missing settings and SQLAlchemy errors
    when the database cannot be initialized.
    """
    if settings is None:
        settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info(f"Starting memobbs with {settings.describe()}")

    app = FastAPI(
        title="MemoBBS",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    engine = create_db_engine(settings.database_url)
    init_db(engine)
    session_factory = create_session_factory(engine)

    store = ResourceStore(settings.upload_dir, public_base_url(settings.server_url, settings.port))
    store.ensure_root()

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.auth_service = AuthService(
        settings.admin_username,
        settings.admin_password,
        TokenManager(
            settings.jwt_secret,
            ttl=timedelta(hours=settings.token_ttl_hours),
            renew_threshold=timedelta(minutes=settings.token_renew_threshold_minutes),
        ),
    )
    app.state.resource_store = store
    app.state.log_recorder = RequestLogRecorder(session_factory, settings.application_id)

    # Add request logger middleware
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(ResponseValidationError, response_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[RENEWAL_HEADER],
    )

    register_routes(app)

    app.mount(UPLOADS_URL_PATH, StaticFiles(directory=settings.upload_dir), name="uploads")

    logger.info(f"Resources served from {store.base_url}{UPLOADS_URL_PATH}")
    return app
