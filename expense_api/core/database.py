# expense_api/core/database.py
import logging
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from .config import Settings

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database."""
    engine_kwargs = {
        "echo": settings.DATABASE_ECHO,
        "future": True,
        "pool_pre_ping": True,
    }

    if settings.is_sqlite:
        # SQLite needs its parent directory and a connection usable across threads
        database = make_url(settings.DATABASE_URL).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs.update(
            {
                "pool_size": 5,
                "max_overflow": 5,
                "pool_timeout": 30,  # Seconds to wait for a free connection
                "pool_recycle": 300,  # Recycle connections after 5 minutes
            }
        )

    logger.info(f"Creating database engine for {make_url(settings.DATABASE_URL).get_backend_name()}")
    return create_async_engine(settings.DATABASE_URL, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def create_db_and_tables(engine: AsyncEngine) -> None:
    # Import models so they are registered on Base.metadata
    from expense_api.models import budget, category, expense, goal  # noqa: F401
    from expense_api.core import auth  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Dependency to get DB session with proper exception handling
async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    session = request.app.state.session_factory()
    try:
        yield session
    except SQLAlchemyError as e:
        logger.error(f"Database session error: {str(e)}")
        await session.rollback()
        raise
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
        logger.debug("Database session closed")
