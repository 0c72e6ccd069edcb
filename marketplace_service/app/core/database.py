from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from marketplace_service.app.core.settings import get_settings
from marketplace_service.app.models.base import MarketplaceBase
from marketplace_service.app.utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging(
    "marketplace_service.database", log_level=get_settings().LOG_LEVEL
)


def _mask_database_url(database_url: str) -> str:
    if "@" not in database_url:
        return database_url
    scheme, _, rest = database_url.partition("://")
    return f"{scheme}://***@{rest.split('@', 1)[1]}"


class MarketplaceDatabaseManager:
    """Database manager for the Marketplace Service."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        logger.info(
            "Initializing Marketplace Service database manager",
            extra={
                "operation": "database_manager_init",
                "database_url": _mask_database_url(database_url),
                "echo": echo,
                "event_type": "database_manager_initialization",
            },
        )

        engine_kwargs: Dict[str, Any] = {"echo": echo}

        if "sqlite" in database_url:
            # SQLite for development and tests; connections are not pooled
            # so that sessions opened from different event loops stay valid.
            engine_kwargs["connect_args"] = {
                "timeout": 60,
                "check_same_thread": False,
            }
            engine_kwargs["poolclass"] = NullPool
            logger.info(
                "Configured SQLite database settings",
                extra={"database_type": "sqlite", "timeout": 60},
            )
        else:
            engine_kwargs.update(
                {
                    "pool_size": 10,
                    "max_overflow": 20,
                    "pool_timeout": 30,
                    "pool_recycle": 3600,
                    "pool_pre_ping": True,
                    "connect_args": {
                        "command_timeout": 30,
                        "prepared_statement_cache_size": 0,
                    },
                }
            )
            logger.info(
                "Configured PostgreSQL database settings",
                extra={
                    "database_type": "postgresql",
                    "pool_size": 10,
                    "max_overflow": 20,
                    "pool_recycle": 3600,
                },
            )

        self.async_engine = create_async_engine(database_url, **engine_kwargs)
        self.async_session_maker = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )

    async def create_tables(self) -> None:
        """Create all Marketplace Service database tables."""

        async with self.async_engine.begin() as conn:
            await conn.run_sync(MarketplaceBase.metadata.create_all, checkfirst=True)
        logger.info(
            "Database tables created successfully",
            extra={"operation": "create_tables", "event_type": "database_tables_created"},
        )

    async def drop_tables(self) -> None:
        """Drop all Marketplace Service database tables."""

        async with self.async_engine.begin() as conn:
            await conn.run_sync(MarketplaceBase.metadata.drop_all)
        logger.info(
            "Database tables dropped",
            extra={"operation": "drop_tables", "event_type": "database_tables_dropped"},
        )

    async def ping(self) -> None:
        """Run a trivial query; raises when the database is unreachable."""

        async with self.async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session."""

        async with self.async_session_maker() as session:
            yield session

    async def close(self) -> None:
        """Close the database engine and its connections."""

        await self.async_engine.dispose()
        logger.info(
            "Marketplace Service database connections closed",
            extra={"operation": "database_close", "event_type": "database_shutdown"},
        )


settings = get_settings()
database_manager = MarketplaceDatabaseManager(
    database_url=settings.MARKETPLACE_DATABASE_URL, echo=settings.DEBUG
)
