"""Create the Inkwell tables on the configured database."""

import logging

from inkwell.core.settings import settings
from inkwell.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database initialized at %s", settings.database_url)


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    init_db()
