# fundytrack/db/init_db.py
"""
Create (or drop and recreate) the relational schema.

    python -m fundytrack.db.init_db          # create missing tables
    python -m fundytrack.db.init_db --reset  # drop everything first
"""
import argparse
import asyncio
import logging

from fundytrack.core.logging import setup_logging
from fundytrack.db.base_class import Base
from fundytrack.db.database import get_engine
from fundytrack.db import models  # noqa: F401  (registers the tables on Base.metadata)

logger = logging.getLogger(__name__)


async def init_db(reset: bool = False) -> None:
    engine = get_engine()
    async with engine.begin() as conn:
        if reset:
            logger.info("Dropping all tables")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the FundyTrack database schema")
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    args = parser.parse_args()
    setup_logging()
    asyncio.run(init_db(reset=args.reset))


if __name__ == "__main__":
    main()
