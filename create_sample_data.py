#!/usr/bin/env python3
"""Seed a welcome memo when the memo collection is empty."""

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from memobbs.core.config import ConfigurationError, Settings
from memobbs.core.database import create_db_engine, create_session_factory, init_db
from memobbs.logging.setup import configure_logging
from memobbs.memos.dao import MemoDAO
from memobbs.memos.schemas import MemoCreate
from memobbs.memos.service import MemoService

logger = logging.getLogger("memobbs.seed")

SAMPLE_MEMOS = [
    MemoCreate(
        content=(
            "# Welcome to MemoBBS\n\n"
            "Write memos in **Markdown**. Code blocks are highlighted:\n\n"
            "```python\nprint('hello, memo')\n```\n"
        ),
        tags=["welcome"],
    ),
]


def create_sample_data(session_factory) -> int:
    """Insert the sample memos if no memo exists yet; return how many were created."""
    with session_factory() as session:
        service = MemoService(MemoDAO(session))
        if service.count() > 0:
            logger.info("Memos already present, skipping sample data")
            return 0
        for memo in SAMPLE_MEMOS:
            service.create_memo(memo)
    logger.info(f"Created {len(SAMPLE_MEMOS)} sample memos")
    return len(SAMPLE_MEMOS)


def main() -> None:
    configure_logging()
    try:
        settings = Settings.from_env()
        engine = create_db_engine(settings.database_url)
        init_db(engine)
        create_sample_data(create_session_factory(engine))
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)
    except SQLAlchemyError as e:
        logger.critical(f"Failed to seed the database: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
