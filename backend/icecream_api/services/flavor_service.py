"""
Acme Ice Cream API: Flavor Service (Data Access)
=================================================

What:  The four data-access operations behind /api/flavors.
How:   Each method issues exactly one parameterized statement through the
       request's AsyncSession and commits it immediately.
Who:   Called by route handlers in routes/flavors.py.

Statements:
    list_flavors   SELECT * FROM flavors ORDER BY id
    create_flavor  INSERT INTO flavors(name) VALUES(:name) RETURNING *
    update_flavor  UPDATE flavors SET name=:name WHERE id=:id RETURNING *
    delete_flavor  DELETE FROM flavors WHERE id=:id RETURNING *

Result conventions:
    A missing row is reported as a `None` return value; the handler decides
    what that means for the response. Any SQLAlchemy failure is logged with
    full detail and re-raised as DatabaseError.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from icecream_api.exceptions import DatabaseError
from icecream_api.models.flavor import Flavor

logger = logging.getLogger(__name__)


class FlavorService:
    """
    Stateless data-access layer for the flavors table.

    Every method receives the session to use, so a single instance can be
    shared by all requests.
    """

    async def list_flavors(self, db: AsyncSession) -> List[Flavor]:
        """
        Return every flavor, ordered by id.

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(Flavor).order_by(Flavor.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Error fetching flavors: %s", str(e))
            raise DatabaseError(
                message="Could not fetch flavors",
                context={"operation": "list", "error_type": type(e).__name__},
            )

    async def create_flavor(self, db: AsyncSession, name: str) -> Flavor:
        """
        Insert a flavor and return the stored row.

        The database assigns `id` and the default `updated_at`.

        Raises:
            DatabaseError: Insert failed (→ 500)
        """
        try:
            result = await db.execute(
                insert(Flavor).values(name=name).returning(Flavor)
            )
            flavor = result.scalar_one()
            await db.commit()
            logger.info("Flavor created: %s", flavor.id)
            return flavor
        except SQLAlchemyError as e:
            logger.error("Error creating flavor: %s", str(e))
            raise DatabaseError(
                message="Could not create flavor",
                context={"operation": "create", "error_type": type(e).__name__},
            )

    async def update_flavor(
        self, db: AsyncSession, flavor_id: int, name: str
    ) -> Optional[Flavor]:
        """
        Rename the flavor with the given id.

        Only `name` changes; `updated_at` keeps its insert-time value.

        Returns:
            The updated row, or None when no row has that id.

        Raises:
            DatabaseError: Update failed (→ 500)
        """
        try:
            result = await db.execute(
                update(Flavor)
                .where(Flavor.id == flavor_id)
                .values(name=name)
                .returning(Flavor)
            )
            flavor = result.scalar_one_or_none()
            await db.commit()
            return flavor
        except SQLAlchemyError as e:
            logger.error("Error updating flavor %s: %s", flavor_id, str(e))
            raise DatabaseError(
                message="Could not update flavor",
                context={
                    "operation": "update",
                    "flavor_id": flavor_id,
                    "error_type": type(e).__name__,
                },
            )

    async def delete_flavor(self, db: AsyncSession, flavor_id: int) -> Optional[Flavor]:
        """
        Delete the flavor with the given id.

        Returns:
            The deleted row (used only as an existence check), or None when
            no row has that id.

        Raises:
            DatabaseError: Delete failed (→ 500)
        """
        try:
            result = await db.execute(
                delete(Flavor).where(Flavor.id == flavor_id).returning(Flavor)
            )
            flavor = result.scalar_one_or_none()
            await db.commit()
            return flavor
        except SQLAlchemyError as e:
            logger.error("Error deleting flavor %s: %s", flavor_id, str(e))
            raise DatabaseError(
                message="Could not delete flavor",
                context={
                    "operation": "delete",
                    "flavor_id": flavor_id,
                    "error_type": type(e).__name__,
                },
            )


flavor_service = FlavorService()
