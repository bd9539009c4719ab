"""FastAPI application setup module."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from analytics_api.database.database import build_engine, build_session_factory, init_database
from analytics_api.endpoints.analytics import router as analytics_router
from analytics_api.schemas.analytics import HealthResponse
from analytics_api.services.analytics_service import AnalyticsEngine, AnalyticsService
from analytics_api.services.seed_service import seed_transactions
from analytics_api.services.transaction_store import (
    NullTransactionStore,
    SqlTransactionStore,
    TransactionStore,
)
from analytics_api.settings import Settings, settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


async def connect_store(
    config: Settings,
) -> tuple[TransactionStore, Optional[AsyncEngine]]:
    """Connect to the database, or fall back to demo mode.

    Creates the schema and seeds it when configured to. Returns the
    store to inject into the engine and the database engine to dispose
    of at shutdown (None in demo mode).
    """
    db_engine = None
    try:
        db_engine = build_engine(config)
        await init_database(db_engine, timeout=config.DB_CONNECT_TIMEOUT_SECONDS)
    except (SQLAlchemyError, OSError, ImportError, asyncio.TimeoutError) as e:
        logger.warning("Could not connect to database: %r", e)
        logger.warning("Running in demo mode without database functionality")
        if db_engine is not None:
            await db_engine.dispose()
        return NullTransactionStore(), None

    session_factory = build_session_factory(db_engine)

    if config.SEED_ON_STARTUP:
        try:
            await asyncio.wait_for(
                seed_transactions(
                    session_factory,
                    months=config.SEED_MONTHS,
                    per_month=config.SEED_PER_MONTH,
                ),
                timeout=config.SEED_TIMEOUT_SECONDS,
            )
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.warning("Failed to seed data: %r", e)

    store = SqlTransactionStore(session_factory, timeout=config.QUERY_TIMEOUT_SECONDS)
    return store, db_engine


def create_app(
    config: Settings = settings,
    store: Optional[TransactionStore] = None,
) -> FastAPI:
    """Build the application.

    When ``store`` is given it is used as is; otherwise the store is
    chosen at startup by ``connect_store``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_engine = None
        if app.state.analytics is None:
            chosen, db_engine = await connect_store(config)
            app.state.analytics = AnalyticsService(
                AnalyticsEngine(chosen, default_limit=config.DEFAULT_TOP_LIMIT)
            )

        logger.info("Server starting on port %s", config.PORT)
        logger.info("Swagger documentation: http://localhost:%s/docs", config.PORT)
        logger.info("Health check: http://localhost:%s/api/v1/health", config.PORT)
        logger.info("Analytics API: http://localhost:%s/api/v1/analytics/", config.PORT)
        yield

        if db_engine is not None:
            await db_engine.dispose()

    app = FastAPI(
        title="ABT Analytics API",
        description="Analytics dashboard API for ABT Corporation",
        version="1.0.0",
        debug=config.DEBUG,
        lifespan=lifespan,
    )

    app.state.analytics = None
    if store is not None:
        app.state.analytics = AnalyticsService(
            AnalyticsEngine(store, default_limit=config.DEFAULT_TOP_LIMIT)
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Length"],
        max_age=12 * 3600,
    )

    app.include_router(analytics_router)

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["health"])
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint. Reports "degraded" in demo mode."""
        status = await request.app.state.analytics.health_status()
        return HealthResponse(status=status)

    return app


app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
