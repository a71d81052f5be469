"""Repository base class used by all concrete repositories."""
import logging
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """Wraps an :class:`AsyncSession` owned by the caller.

    Writes are flushed, never committed: the service driving the repository
    decides where the transaction ends so a state transition touching two
    tables lands atomically.

    Reads use ``populate_existing`` so rows already in the identity map come
    back with their eager-loaded relationships refreshed.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._log = logging.getLogger(f'relations_api.repository.{type(self).__name__}')

    async def _add(self, instance: Any) -> Any:
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def _first(self, stmt) -> Optional[Any]:
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return result.scalars().first()

    async def _all(self, stmt) -> List[Any]:
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def _delete(self, stmt) -> int:
        result = await self.db.execute(stmt)
        return result.rowcount or 0
