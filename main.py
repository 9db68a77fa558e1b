#!/usr/bin/env python3
"""Run the memo board with uvicorn."""

import logging
import sys

import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from memobbs.app import create_app
from memobbs.core.config import ConfigurationError, Settings
from memobbs.logging.setup import configure_logging

logger = logging.getLogger("memobbs.main")


def main() -> None:
    configure_logging()
    try:
        settings = Settings.from_env()
        app = create_app(settings)
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)
    except (SQLAlchemyError, OSError) as e:
        logger.critical(f"Failed to initialize storage: {e}")
        sys.exit(1)

    logger.info(f"Server is running on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
