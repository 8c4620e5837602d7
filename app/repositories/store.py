# app/repositories/store.py
"""Document-style store operations over an async SQLAlchemy session.

Every call is bounded by DB_TIMEOUT_SECONDS and never retried. Driver
errors are translated into app.core.exceptions types; "not found" is
reported as None / False, never as an exception.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import DuplicateValueError, StoreError, StoreTimeoutError

logger = logging.getLogger(__name__)

SortSpec = Sequence[Tuple[str, int]]  # (column, 1 | -1)


class DocumentStore:
    def __init__(self, db: AsyncSession, model: Type, timeout: Optional[float] = None):
        self.db = db
        self.model = model
        self.timeout = settings.DB_TIMEOUT_SECONDS if timeout is None else timeout

    async def _run(self, coro):
        try:
            return await asyncio.wait_for(coro, self.timeout)
        except asyncio.TimeoutError as e:
            await self._rollback()
            logger.error("%s store call timed out after %ss", self.model.__tablename__, self.timeout)
            raise StoreTimeoutError("The data store did not respond in time") from e
        except IntegrityError as e:
            await self._rollback()
            logger.warning("Duplicate value on %s: %s", self.model.__tablename__, getattr(e, "orig", e))
            raise DuplicateValueError("duplicate value: a record with this value already exists") from e
        except SQLAlchemyError as e:
            await self._rollback()
            logger.exception("Store failure on %s", self.model.__tablename__)
            raise StoreError("The data store request failed") from e

    async def _rollback(self) -> None:
        try:
            await self.db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed on %s", self.model.__tablename__)

    def _where(self, stmt, filter: Optional[Dict[str, Any]]):
        for key, value in (filter or {}).items():
            stmt = stmt.where(getattr(self.model, key) == value)
        return stmt

    async def find_by_id(self, id: str):
        return await self._run(self.db.get(self.model, id, populate_existing=True))

    async def find_one(self, filter: Dict[str, Any]):
        stmt = self._where(select(self.model), filter).limit(1)
        result = await self._run(self.db.execute(stmt))
        return result.scalars().first()

    async def find_many(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Any]:
        stmt = self._where(select(self.model), filter)
        for column, direction in sort or ():
            col = getattr(self.model, column)
            stmt = stmt.order_by(col.desc() if direction < 0 else col.asc())
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._run(self.db.execute(stmt))
        return list(result.scalars().all())

    async def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        stmt = self._where(select(func.count()).select_from(self.model), filter)
        result = await self._run(self.db.execute(stmt))
        return result.scalar_one()

    async def exists(self, filter: Dict[str, Any]) -> bool:
        return await self.find_one(filter) is not None

    async def create(self, values: Dict[str, Any]):
        record = self.model(**values)

        async def _create():
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
            return record

        return await self._run(_create())

    async def update_by_id(self, id: str, values: Dict[str, Any]):
        """$set semantics: keys not in ``values`` are left untouched."""
        async def _update():
            record = await self.db.get(self.model, id, populate_existing=True)
            if record is None:
                return None
            for key, value in values.items():
                setattr(record, key, value)
            await self.db.commit()
            await self.db.refresh(record)
            return record

        return await self._run(_update())

    async def update_one(self, filter: Dict[str, Any], values: Dict[str, Any], upsert: bool = False):
        async def _update():
            stmt = self._where(select(self.model), filter).limit(1)
            record = (await self.db.execute(stmt)).scalars().first()
            if record is None:
                if not upsert:
                    return None
                record = self.model(**{**filter, **values})
                self.db.add(record)
            else:
                for key, value in values.items():
                    setattr(record, key, value)
            await self.db.commit()
            await self.db.refresh(record)
            return record

        return await self._run(_update())

    async def push(self, id: str, field: str, value: Any) -> bool:
        """Append ``value`` to a JSON list column. False when no row matched."""
        async def _push():
            record = await self.db.get(self.model, id, populate_existing=True)
            if record is None:
                return False
            # reassign so the JSON column is flagged dirty
            setattr(record, field, [*(getattr(record, field) or []), value])
            await self.db.commit()
            return True

        return await self._run(_push())

    async def delete_by_id(self, id: str) -> bool:
        async def _delete():
            record = await self.db.get(self.model, id)
            if record is None:
                return False
            await self.db.delete(record)
            await self.db.commit()
            return True

        return await self._run(_delete())
