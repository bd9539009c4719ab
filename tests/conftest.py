"""Pytest fixtures for transaction stores and an async SQLite test database."""
import uuid
from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from analytics_api.database.database import Base
from analytics_api.models.transaction import Transaction
from analytics_api.schemas.transaction import TransactionRecord
from analytics_api.services.transaction_store import InMemoryTransactionStore

# (country, region, product, amount, quantity, transaction_date)
EXAMPLE_ROWS = [
    ("US", "West", "Widget", Decimal("100.00"), 2, datetime(2024, 1, 10, 9, 30)),
    ("US", "East", "Widget", Decimal("50.00"), 1, datetime(2024, 1, 22, 14, 0)),
    ("CA", "West", "Gadget", Decimal("200.00"), 3, datetime(2024, 3, 5, 11, 15)),
]


def make_record(country, region, product, amount, quantity, transaction_date):
    """Build a validated transaction record."""
    return TransactionRecord(
        country=country,
        region=region,
        product=product,
        amount=Decimal(amount),
        quantity=quantity,
        transaction_date=transaction_date,
    )


@pytest.fixture
def example_records():
    """The three-transaction example dataset."""
    return [make_record(*row) for row in EXAMPLE_ROWS]


@pytest.fixture
def memory_store(example_records):
    """In-memory store holding the example dataset."""
    return InMemoryTransactionStore(example_records)


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with the schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    """Session factory bound to the test database."""
    return async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def sample_transactions(session_factory):
    """Insert the example dataset into the test database."""
    transactions = [
        Transaction(
            id=uuid.uuid4(),
            country=country,
            region=region,
            product=product,
            amount=amount,
            quantity=quantity,
            transaction_date=transaction_date,
        )
        for country, region, product, amount, quantity, transaction_date in EXAMPLE_ROWS
    ]
    async with session_factory() as session:
        session.add_all(transactions)
        await session.commit()
    return transactions
