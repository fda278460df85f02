"""
Looks up cover images for saved books that do not have one yet.

Books added while auto-fill was off, or while the lookup services were
unreachable, end up without a cover. This script asks the same sources the
form uses and stores whatever cover they return. Authors are never changed.

Usage:
    python scripts/backfill_covers.py [limit]
"""

import asyncio
import logging
import sys
from typing import Optional

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

try:
    import httpx
    from sqlalchemy.orm import Session
    from readinglog.db.session import SessionLocal
    from readinglog.services.library import backfill_covers
    from readinglog.core.config import settings
except ImportError as e:
    logger.error(f"Error importing modules: {e}.")
    logger.error("Make sure the project is installed with 'pip install -e .'")
    sys.exit(1)

DEFAULT_LIMIT: int = 50

async def main(db: Session, limit: int) -> int:
    async with httpx.AsyncClient(timeout=settings.LOOKUP_TIMEOUT) as client:
        return await backfill_covers(db, limit=limit, client=client)

if __name__ == "__main__":
    if not settings.ENRICHMENT_ENABLED:
        logger.error("ENRICHMENT_ENABLED is off. Nothing to do.")
        sys.exit(1)

    limit = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_LIMIT
    db_session: Optional[Session] = None
    try:
        db_session = SessionLocal()
        asyncio.run(main(db_session, limit))
    finally:
        if db_session:
            logger.info("Closing database session.")
            db_session.close()
