"""Transaction store module.

The analytics engine reads transactions through a ``TransactionStore``.
One implementation is chosen at startup and injected into the engine:

- ``SqlTransactionStore``: async SQLAlchemy sessions against the
  ``transactions`` table, every query bounded by a timeout
- ``InMemoryTransactionStore``: a fixed list of records
- ``NullTransactionStore``: demo mode, always empty
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from analytics_api.exceptions.analytics_errors import StoreUnavailable
from analytics_api.models.transaction import Transaction
from analytics_api.schemas.transaction import MAX_YEAR, TransactionFilter, TransactionRecord

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT_SECONDS = 5.0


class TransactionStore(ABC):
    """Read-only source of transaction records."""

    is_null = False

    @abstractmethod
    async def query(
        self, filter: Optional[TransactionFilter] = None
    ) -> list[TransactionRecord]:
        """Return all records matching ``filter``.

        Raises:
            StoreUnavailable: the backing store cannot be read
        """

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the store is reachable."""


class NullTransactionStore(TransactionStore):
    """Store used when no database is available."""

    is_null = True

    async def query(
        self, filter: Optional[TransactionFilter] = None
    ) -> list[TransactionRecord]:
        return []

    async def ping(self) -> bool:
        return False


class InMemoryTransactionStore(TransactionStore):
    """Store over an in-memory list of records."""

    def __init__(self, records: Iterable[TransactionRecord] = ()):
        self._records = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    async def query(
        self, filter: Optional[TransactionFilter] = None
    ) -> list[TransactionRecord]:
        if filter is None:
            return list(self._records)
        return [r for r in self._records if filter.matches(r)]

    async def ping(self) -> bool:
        return True


class SqlTransactionStore(TransactionStore):
    """Store backed by the ``transactions`` table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout: float = DEFAULT_QUERY_TIMEOUT_SECONDS,
    ):
        self.session_factory = session_factory
        self.timeout = timeout

    async def query(
        self, filter: Optional[TransactionFilter] = None
    ) -> list[TransactionRecord]:
        stmt = select(
            Transaction.id,
            Transaction.country,
            Transaction.region,
            Transaction.product,
            Transaction.amount,
            Transaction.quantity,
            Transaction.transaction_date,
        )
        if filter is not None and filter.year is not None:
            # Half-open range on transaction_date
            stmt = stmt.where(Transaction.transaction_date >= datetime(filter.year, 1, 1))
            if filter.year < MAX_YEAR:
                stmt = stmt.where(
                    Transaction.transaction_date < datetime(filter.year + 1, 1, 1)
                )

        rows = await self._run(self._fetch(stmt), "query")
        # Unvalidated; the engine skips corrupt records
        return [TransactionRecord.model_construct(**row._mapping) for row in rows]

    async def ping(self) -> bool:
        try:
            await self._run(self._select_one(), "ping")
        except StoreUnavailable as e:
            logger.warning("Transaction store ping failed: %s", e)
            return False
        return True

    async def _fetch(self, stmt):
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.all()

    async def _select_one(self) -> None:
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))

    async def _run(self, coro, operation: str):
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise StoreUnavailable(
                f"Transaction store {operation} timed out after {self.timeout}s"
            ) from e
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Transaction store {operation} failed: {e}") from e
