#!/usr/bin/env python
"""
Transaction Seeding Script

Creates the transactions table if needed and fills it with synthetic
sales data when it is empty.

Usage:
    python seed_transactions.py
    python seed_transactions.py --months 24 --per-month 100
    python seed_transactions.py --database-url sqlite+aiosqlite:///analytics.db
    python seed_transactions.py --seed 42
"""
import argparse
import asyncio
import sys
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from analytics_api.database.database import build_engine, build_session_factory, init_database
from analytics_api.services.seed_service import seed_transactions
from analytics_api.settings import Settings, settings


async def run(config: Settings, months: int, per_month: int, seed: Optional[int] = None) -> int:
    """Create the schema and seed it. Returns the number of rows inserted."""
    engine = build_engine(config)
    try:
        await init_database(engine, timeout=config.DB_CONNECT_TIMEOUT_SECONDS)
        session_factory = build_session_factory(engine)
        return await seed_transactions(
            session_factory, months=months, per_month=per_month, seed=seed
        )
    finally:
        await engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed the ABT Analytics database with sample transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --months 24 --per-month 100
  %(prog)s --database-url sqlite+aiosqlite:///analytics.db --seed 42
        """
    )

    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Database URL (default: DATABASE_URL setting)"
    )

    parser.add_argument(
        "--months",
        type=int,
        default=settings.SEED_MONTHS,
        help=f"Number of months to cover (default: {settings.SEED_MONTHS})"
    )

    parser.add_argument(
        "--per-month",
        type=int,
        default=settings.SEED_PER_MONTH,
        help=f"Transactions per month (default: {settings.SEED_PER_MONTH})"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible data"
    )

    return parser


def main():
    """Main entry point for the script."""
    args = build_parser().parse_args()

    if args.months < 1 or args.per_month < 1:
        print("❌ Error: --months and --per-month must be at least 1", file=sys.stderr)
        sys.exit(1)

    config = settings
    if args.database_url:
        config = settings.model_copy(update={"DATABASE_URL": args.database_url})

    print(f"🌱 Seeding {args.months} month(s) x {args.per_month} transaction(s)")

    try:
        created = asyncio.run(run(config, args.months, args.per_month, args.seed))
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)

    if created:
        print(f"🎉 Seeding complete! Created {created} transaction(s)")
    else:
        print("⚠️  Transactions table already has data, nothing seeded")


if __name__ == "__main__":
    main()
