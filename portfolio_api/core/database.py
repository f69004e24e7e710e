"""Async database engine and session management.

The engine and session factory are built per application by create_app()
and kept on app.state; get_db() reads them from the request, so every app
talks to the database its own settings name.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from portfolio_api.core.config import Settings


def build_engine(app_settings: Settings) -> AsyncEngine:
    """Create the connection-pooled async engine for one application.

    No connection is opened until the first query.
    """
    return create_async_engine(
        app_settings.database_url,
        echo=app_settings.environment == "development",
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session.

    Commits when the request handler returns, rolls back if it raises.
    """
    session_factory: async_sessionmaker[AsyncSession] = (
        request.app.state.db_session_factory
    )
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
