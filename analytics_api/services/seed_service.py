"""Seed service module.

Fills an empty ``transactions`` table with synthetic sales so the
dashboard has something to show. Runs once at startup before the API
serves traffic, or from ``seed_transactions.py``.
"""
import logging
import random
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from analytics_api.models.transaction import Transaction
from analytics_api.schemas.transaction import TransactionRecord

logger = logging.getLogger(__name__)

# Country -> regions sold into
COUNTRY_REGIONS = {
    "United States": ["West", "East", "Central", "South"],
    "Canada": ["West", "East"],
    "Germany": ["North", "South"],
    "United Kingdom": ["North", "South"],
    "France": ["North", "South"],
    "Japan": ["East", "West"],
    "Australia": ["East", "West"],
    "Brazil": ["South", "North"],
}

# Product -> unit price
PRODUCT_PRICES = {
    "Laptop Pro 15": Decimal("1299.99"),
    "Laptop Air 13": Decimal("999.00"),
    "Smartphone X": Decimal("799.50"),
    "Tablet 10": Decimal("449.00"),
    "Wireless Headphones": Decimal("199.99"),
    "Smart Watch": Decimal("249.90"),
    "4K Monitor": Decimal("379.00"),
    "Mechanical Keyboard": Decimal("129.95"),
    "Wireless Mouse": Decimal("39.99"),
    "USB-C Dock": Decimal("159.00"),
}

MAX_QUANTITY = 10

_CENT = Decimal("0.01")


def _month_starts(months: int, end_date: date) -> list[date]:
    """First day of each of the ``months`` months ending with ``end_date``'s month."""
    year, month = end_date.year, end_date.month
    starts = []
    for _ in range(months):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    starts.reverse()
    return starts


def generate_transactions(
    months: int = 12,
    per_month: int = 40,
    seed: Optional[int] = None,
    end_date: Optional[date] = None,
) -> list[TransactionRecord]:
    """Generate ``months * per_month`` synthetic transactions.

    Args:
        months: Number of calendar months to cover
        per_month: Transactions generated in each month
        seed: Seed for the random generator, for reproducible output
        end_date: Last month covered (defaults to today)

    Returns:
        Validated transaction records, oldest month first
    """
    if months < 1:
        raise ValueError(f"months must be at least 1, got {months}")
    if per_month < 1:
        raise ValueError(f"per_month must be at least 1, got {per_month}")

    rng = random.Random(seed)
    end = end_date or date.today()
    countries = sorted(COUNTRY_REGIONS)
    products = sorted(PRODUCT_PRICES)

    records = []
    for start in _month_starts(months, end):
        for _ in range(per_month):
            country = rng.choice(countries)
            product = rng.choice(products)
            quantity = rng.randint(1, MAX_QUANTITY)
            amount = (PRODUCT_PRICES[product] * quantity).quantize(_CENT)
            records.append(
                TransactionRecord(
                    country=country,
                    region=rng.choice(COUNTRY_REGIONS[country]),
                    product=product,
                    amount=amount,
                    quantity=quantity,
                    transaction_date=datetime(
                        start.year,
                        start.month,
                        rng.randint(1, 28),
                        rng.randint(8, 20),
                        rng.randint(0, 59),
                    ),
                )
            )
    return records


async def count_transactions(session: AsyncSession) -> int:
    """Return the number of stored transactions."""
    result = await session.execute(select(func.count()).select_from(Transaction))
    return result.scalar() or 0


async def seed_transactions(
    session_factory: async_sessionmaker[AsyncSession],
    months: int = 12,
    per_month: int = 40,
    seed: Optional[int] = None,
    end_date: Optional[date] = None,
) -> int:
    """Seed the transactions table when it is empty.

    Returns:
        Number of transactions inserted (0 when data already exists)
    """
    async with session_factory() as session:
        existing = await count_transactions(session)
        if existing > 0:
            logger.info("Data already seeded (%d transactions), skipping...", existing)
            return 0

        logger.info("Seeding database with sample data...")
        records = generate_transactions(months, per_month, seed, end_date)
        session.add_all(
            [Transaction(**record.model_dump()) for record in records]
        )
        await session.commit()

    logger.info("Seeded %d transaction(s) over %d month(s)", len(records), months)
    return len(records)
