"""Row-level access to the remote ``users`` and ``logs`` tables."""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.collation import Collation
from pymongo.errors import PyMongoError

from periodlog.exceptions import StoreError

logger = logging.getLogger(__name__)

USERS = "users"
LOGS = "logs"
TABLES = (USERS, LOGS)


def build_query(eq: Optional[dict[str, Any]] = None, ilike: Optional[dict[str, str]] = None) -> dict[str, Any]:
    """Equality filters plus case-insensitive whole-value matches."""
    query: dict[str, Any] = dict(eq or {})
    for column, value in (ilike or {}).items():
        query[column] = {"$regex": f"^{re.escape(value)}$", "$options": "i"}
    return query


class TableStore:
    """Select / insert / update-by-id over MongoDB collections.

    Each row keeps its ``id`` column and also uses it as ``_id``, which is
    never returned to callers.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self._db = database

    def _table(self, table: str):
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        return self._db[table]

    async def select(
        self,
        table: str,
        *,
        eq: Optional[dict[str, Any]] = None,
        ilike: Optional[dict[str, str]] = None,
    ) -> list[dict[str, Any]]:
        try:
            cursor = self._table(table).find(build_query(eq, ilike), {"_id": False})
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error selecting from {table}: {e}")
            raise StoreError(f"Could not read {table}") from e

    async def select_one(
        self,
        table: str,
        *,
        eq: Optional[dict[str, Any]] = None,
        ilike: Optional[dict[str, str]] = None,
    ) -> Optional[dict[str, Any]]:
        try:
            return await self._table(table).find_one(build_query(eq, ilike), {"_id": False})
        except PyMongoError as e:
            logger.error(f"Error selecting from {table}: {e}")
            raise StoreError(f"Could not read {table}") from e

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        try:
            await self._table(table).insert_one({"_id": row["id"], **row})
        except PyMongoError as e:
            logger.error(f"Error inserting into {table}: {e}")
            raise StoreError(f"Could not save to {table}") from e

    async def update(self, table: str, row_id: str, values: dict[str, Any]) -> bool:
        """Set ``values`` on the row with ``row_id``; False when no row matched."""
        try:
            result = await self._table(table).update_one({"_id": row_id}, {"$set": values})
        except PyMongoError as e:
            logger.error(f"Error updating {table} row {row_id}: {e}")
            raise StoreError(f"Could not update {table}") from e
        return result.matched_count > 0

    async def ensure_indexes(self) -> None:
        try:
            await self._db[USERS].create_index(
                "email", unique=True, collation=Collation(locale="en", strength=2)
            )
            await self._db[LOGS].create_index("teacher_id")
            await self._db[LOGS].create_index("status")
            await self._db[LOGS].create_index([("timestamp", DESCENDING), ("id", ASCENDING)])
        except PyMongoError as e:
            logger.error(f"Error creating indexes: {e}")
            raise StoreError("Could not prepare the users/logs tables") from e
