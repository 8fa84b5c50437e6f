"""
Acme Ice Cream API: Schema Reset & Seed Data
=============================================

What:  Drops and recreates the flavors table, then inserts the default rows.
When:  Once per process, from the application lifespan, before serving.

The table is rebuilt from scratch on every start; nothing survives a restart.
"""

import logging
from typing import Sequence

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine

from icecream_api.database import Base
from icecream_api.models.flavor import Flavor

logger = logging.getLogger(__name__)

# Inserted in this order, so on a fresh table they receive ids 1..4.
SEED_FLAVOR_NAMES: Sequence[str] = ("Coconut", "Mint", "Honeyberry", "Choco")


async def reset_schema(engine: AsyncEngine) -> None:
    """
    Drop, recreate and seed the schema in one transaction.

    Errors propagate to the caller; the lifespan treats them as fatal.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(
            insert(Flavor.__table__),
            [{"name": name} for name in SEED_FLAVOR_NAMES],
        )
    logger.info("DB has been seeded")
