#!/usr/bin/env python3
"""
Simple database initialization script.

Creates the Kteb Nus tables (books, chapters, comments, likes) on the database
named by DATABASE_URL. Existing tables are left untouched.
"""

import logging
import sys

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from bnusa import models  # noqa: F401  registers the tables on Base.metadata
from bnusa.core.config import settings
from bnusa.db.base import Base, engine

logger = logging.getLogger("init_db")


def main() -> int:
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(message)s")
    logger.info("Connecting to %s", engine.url.render_as_string(hide_password=True))

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        existing = set(inspect(engine).get_table_names())
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error("Database initialization failed: %s", e)
        return 1

    for table in Base.metadata.sorted_tables:
        state = "exists" if table.name in existing else "created"
        logger.info("  %s: %s", table.name, state)
    return 0


if __name__ == "__main__":
    sys.exit(main())
