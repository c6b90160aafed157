import logging
from typing import Optional

import asyncpg
from asyncpg.pool import Pool

from account_service.core.config import Settings

logger = logging.getLogger(__name__)


async def create_db_pool(settings: Settings) -> Pool:
    try:
        pool = await asyncpg.create_pool(
            dsn=settings.asyncpg_url,
            min_size=5,
            max_size=20,
            timeout=30,
        )
    except (OSError, asyncpg.PostgresError) as e:
        logger.error("Error connecting to database: %s", e)
        raise
    logger.info("AsyncPG Connection Pool created successfully.")
    return pool


async def close_db_pool(pool: Optional[Pool]) -> None:
    if pool:
        await pool.close()
        logger.info("AsyncPG Connection Pool closed.")
