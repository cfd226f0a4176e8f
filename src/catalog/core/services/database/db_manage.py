"""Table creation for development and tests. Not a migration tool."""

from loguru import logger
from sqlmodel import SQLModel

from src.catalog.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, db: DbSessionService):
        self._db = db

    async def create_all(self) -> None:
        """Create all database tables that do not exist yet."""
        from src.catalog.entities.service.product import ProductTable  # noqa: F401

        async with self._db.engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)
        logger.info("Database initialized with tables.")

    async def drop_all(self) -> None:
        """Drop all database tables."""
        from src.catalog.entities.service.product import ProductTable  # noqa: F401

        async with self._db.engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.drop_all)
        logger.info("Database tables dropped.")
