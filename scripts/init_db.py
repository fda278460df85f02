"""
Creates the readinglog tables in the database named by DATABASE_URL.

Usage:
    python scripts/init_db.py
"""

import logging
import sys

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

try:
    from sqlalchemy.exc import SQLAlchemyError
    from readinglog.db.session import init_db
    from readinglog.core.config import settings
except ImportError as e:
    logger.error(f"Error importing modules: {e}.")
    logger.error("Make sure the project is installed with 'pip install -e .'")
    sys.exit(1)

if __name__ == "__main__":
    logger.info(f"Creating tables ({settings.ENVIRONMENT})...")
    try:
        init_db()
    except SQLAlchemyError as exc:
        logger.exception(f"Could not create tables: {exc}")
        sys.exit(1)
    logger.info("Tables ready.")
