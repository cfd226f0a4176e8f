"""Database initialization script."""

import asyncio

from src.catalog.core.services.database.db_manage import DbManageService
from src.catalog.core.services.database.db_session import DbSessionService


async def init_db() -> None:
    """Create all database tables."""
    db = DbSessionService()
    try:
        await DbManageService(db).create_all()
    finally:
        await db.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
