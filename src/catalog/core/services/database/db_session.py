"""Database engine and session factory used across the application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import get_config


class DbSessionService:
    def __init__(self, config: ConfigData | None = None):
        """Initialize the shared async database engine and session factory."""

        logger.info("Setting up database engine and session factory")
        main_config = config or get_config()
        db_config = main_config.database

        logger.info("Configuring database engine for environment: {}", main_config.app.environment)
        engine_kwargs = {
            # Connection pool settings
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
            "echo": db_config.echo,
            "echo_pool": False,
            "connect_args": self._get_connect_args(main_config),
        }

        # In-memory SQLite runs on a single static connection with no pool to size
        if db_config.is_sqlite and make_url(db_config.url).database in (None, "", ":memory:"):
            for key in ("pool_size", "max_overflow", "pool_timeout", "pool_recycle"):
                engine_kwargs.pop(key)

        logger.info(
            "Initializing database engine for {} with pool_size={} max_overflow={}",
            make_url(db_config.url).render_as_string(hide_password=True),
            db_config.pool_size,
            db_config.max_overflow,
        )
        self._engine: AsyncEngine = create_async_engine(
            db_config.connection_string, **engine_kwargs
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Prevent lazy loading after commit
            autoflush=True,
        )

        if main_config.app.environment == "production":
            logger.info(
                "Database engine initialized",
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
            )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def _get_connect_args(self, config: ConfigData) -> dict:
        """Get database-specific connection arguments for optimization."""
        connect_args = {}

        if config.database.url.startswith("postgresql+asyncpg"):
            # asyncpg takes server settings as a dict rather than an options string
            connect_args.update(
                {
                    "server_settings": {
                        "application_name": f"{config.app.environment}_catalog",
                        "jit": "off",
                    },
                    "timeout": 30,
                }
            )

        elif config.database.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,
                    "timeout": 20,  # Lock timeout
                }
            )

        return connect_args

    def get_session(self) -> AsyncSession:
        """Return a new session bound to the shared engine."""
        return self._session_factory()

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        db = self.get_session()
        try:
            yield db
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database transaction failed")
            raise
        finally:
            await db.close()

    async def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            async with self._engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database health check failed")
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    async def dispose(self) -> None:
        """Close every pooled connection."""
        logger.info("Disposing database engine")
        await self._engine.dispose()
