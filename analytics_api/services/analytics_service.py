"""Sales analytics service module.

Computes the four sales reports from the transaction store:

- Country revenue: revenue and transaction count per country
- Top products: revenue and units per product, top N
- Monthly sales: revenue and transaction count per calendar month
- Top regions: revenue and transaction count per region, top N

Every report is a single pass over the store's records into a
``key -> accumulator`` map followed by a sort. Amounts are summed as
``Decimal`` so totals keep the precision of the stored amounts.

Ordering rules:
- Ranked reports: totalRevenue descending, then name ascending
- Monthly sales: (year, month) ascending
"""
import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable, Optional, TypeVar

from analytics_api.exceptions.analytics_errors import InvalidArgument, StoreUnavailable
from analytics_api.schemas.analytics import (
    CountryRevenue,
    MonthlySales,
    TopProduct,
    TopRegion,
)
from analytics_api.schemas.transaction import (
    MAX_YEAR,
    MIN_YEAR,
    TransactionFilter,
    TransactionRecord,
)
from analytics_api.services.transaction_store import NullTransactionStore, TransactionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TOP_LIMIT = 5

_ZERO = Decimal("0")


# =============================================================================
# VALIDATION
# =============================================================================

def validate_limit(limit: Any) -> int:
    """Ensure ``limit`` is a positive integer."""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgument(f"limit must be a positive integer, got {limit!r}")
    if limit <= 0:
        raise InvalidArgument(f"limit must be a positive integer, got {limit}")
    return limit


def validate_year(year: Any) -> int:
    """Ensure ``year`` is an integer calendar year."""
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidArgument(f"year must be an integer, got {year!r}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidArgument(f"year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")
    return year


def _clean_amount(value: Any) -> Optional[Decimal]:
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)) and not isinstance(value, bool):
        try:
            amount = Decimal(value)
        except InvalidOperation:
            return None
    else:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def _is_valid(record: TransactionRecord) -> bool:
    """Check a record against the transaction invariants."""
    for name in ("country", "region", "product"):
        value = getattr(record, name, None)
        if not isinstance(value, str) or not value:
            return False
    if _clean_amount(getattr(record, "amount", None)) is None:
        return False
    quantity = getattr(record, "quantity", None)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        return False
    return isinstance(getattr(record, "transaction_date", None), date)


# =============================================================================
# ORDERING
# =============================================================================

def _revenue_rank_key(item: tuple[str, dict]) -> tuple[Decimal, str]:
    """Sort key: revenue descending, then name ascending."""
    name, bucket = item
    return (-bucket["revenue"], name)


def _month_key(item: tuple[tuple[int, int], dict]) -> tuple[int, int]:
    """Sort key: (year, month) ascending."""
    return item[0]


def _new_bucket() -> dict:
    return {"revenue": _ZERO, "quantity": 0, "count": 0}


# =============================================================================
# ENGINE
# =============================================================================

class AnalyticsEngine:
    """Aggregation engine over a transaction store.

    Without a store the engine runs in demo mode: every report is empty.
    The engine keeps no state between calls.
    """

    def __init__(
        self,
        store: Optional[TransactionStore] = None,
        default_limit: int = DEFAULT_TOP_LIMIT,
    ):
        self.store = store if store is not None else NullTransactionStore()
        self.default_limit = validate_limit(default_limit)

    @property
    def has_store(self) -> bool:
        return not self.store.is_null

    async def country_revenue(self) -> list[CountryRevenue]:
        """Revenue per country, highest revenue first."""
        buckets = await self._aggregate(lambda r: r.country)
        return [
            CountryRevenue(
                country=country,
                totalRevenue=bucket["revenue"],
                transactionCount=bucket["count"],
            )
            for country, bucket in sorted(buckets.items(), key=_revenue_rank_key)
        ]

    async def top_products(self, limit: Optional[int] = None) -> list[TopProduct]:
        """Top ``limit`` products by revenue."""
        limit = self._resolve_limit(limit)
        buckets = await self._aggregate(lambda r: r.product)
        ranked = sorted(buckets.items(), key=_revenue_rank_key)[:limit]
        return [
            TopProduct(
                product=product,
                totalRevenue=bucket["revenue"],
                totalQuantity=bucket["quantity"],
            )
            for product, bucket in ranked
        ]

    async def monthly_sales(self, year: Optional[int] = None) -> list[MonthlySales]:
        """Revenue per calendar month, oldest first.

        Only months that have transactions are returned. When ``year`` is
        given, the months are restricted to that year.
        """
        filter = None
        if year is not None:
            filter = TransactionFilter(year=validate_year(year))

        buckets = await self._aggregate(
            lambda r: (r.transaction_date.year, r.transaction_date.month),
            filter,
        )
        return [
            MonthlySales(
                yearMonth=f"{y:04d}-{m:02d}",
                totalRevenue=bucket["revenue"],
                transactionCount=bucket["count"],
            )
            for (y, m), bucket in sorted(buckets.items(), key=_month_key)
        ]

    async def top_regions(self, limit: Optional[int] = None) -> list[TopRegion]:
        """Top ``limit`` regions by revenue."""
        limit = self._resolve_limit(limit)
        buckets = await self._aggregate(lambda r: r.region)
        ranked = sorted(buckets.items(), key=_revenue_rank_key)[:limit]
        return [
            TopRegion(
                region=region,
                totalRevenue=bucket["revenue"],
                transactionCount=bucket["count"],
            )
            for region, bucket in ranked
        ]

    def _resolve_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.default_limit
        return validate_limit(limit)

    async def _aggregate(
        self,
        key: Callable[[TransactionRecord], Any],
        filter: Optional[TransactionFilter] = None,
    ) -> dict[Any, dict]:
        """Group valid records by ``key`` into revenue/quantity/count buckets."""
        records = await self.store.query(filter)

        buckets: dict[Any, dict] = defaultdict(_new_bucket)
        skipped = 0
        for record in records:
            if not _is_valid(record):
                skipped += 1
                continue
            bucket = buckets[key(record)]
            bucket["revenue"] += _clean_amount(record.amount)
            bucket["quantity"] += record.quantity
            bucket["count"] += 1

        if skipped:
            logger.warning(
                "Skipped %d transaction(s) violating invariants", skipped
            )
        return buckets


# =============================================================================
# REQUEST BOUNDARY
# =============================================================================

class AnalyticsService:
    """Request-facing wrapper around ``AnalyticsEngine``.

    Store failures are logged and answered with an empty report;
    ``InvalidArgument`` propagates to the caller.
    """

    def __init__(self, engine: AnalyticsEngine):
        self.engine = engine

    @property
    def demo_mode(self) -> bool:
        return not self.engine.has_store

    async def country_revenue(self) -> list[CountryRevenue]:
        return await self._with_fallback("country revenue", self.engine.country_revenue)

    async def top_products(self, limit: Optional[int] = None) -> list[TopProduct]:
        return await self._with_fallback(
            "top products", self.engine.top_products, limit
        )

    async def monthly_sales(self, year: Optional[int] = None) -> list[MonthlySales]:
        return await self._with_fallback(
            "monthly sales", self.engine.monthly_sales, year
        )

    async def top_regions(self, limit: Optional[int] = None) -> list[TopRegion]:
        return await self._with_fallback(
            "top regions", self.engine.top_regions, limit
        )

    async def health_status(self) -> str:
        """Return "ok" when the store answers, otherwise "degraded"."""
        if self.demo_mode:
            return "degraded"
        if await self.engine.store.ping():
            return "ok"
        return "degraded"

    async def _with_fallback(
        self,
        report: str,
        operation: Callable[..., Awaitable[list[T]]],
        *args: Any,
    ) -> list[T]:
        try:
            return await operation(*args)
        except StoreUnavailable as e:
            logger.warning("Serving empty %s report, store unavailable: %s", report, e)
            return []
