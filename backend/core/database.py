"""Database Module

Async session management plus the Result-returning query helpers the SQL
stores are built on.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from core.config import settings
from core.errors import (
    AppError,
    Ok,
    Err,
    Result,
    not_found,
    DatabaseErrorMapper,
)

T = TypeVar("T")

engine_kwargs = {
    "echo": settings.LOG_SQL,
}

if "sqlite" not in settings.DATABASE_URL:
    engine_kwargs.update({
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    })

engine = create_async_engine(
    settings.DATABASE_URL,
    **engine_kwargs
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

Base = declarative_base()

_db_mapper = DatabaseErrorMapper("database")


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that yields database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Context manager for database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def fetch_one(
    session: AsyncSession,
    model: type[T],
    id: int,
    entity_name: str | None = None,
    origin: str = "database.fetch_one",
) -> Result[T, AppError]:
    """Fetch single entity by primary key.

    Returns:
        Ok(entity) if found
        Err(not_found) if not found
        Err(db_error) on database failure
    """
    name = entity_name or model.__name__
    try:
        result = await session.execute(select(model).where(model.id == id))
        entity = result.scalar_one_or_none()
        if entity is None:
            return not_found(name, id, origin=origin)
        return Ok(entity)
    except SQLAlchemyError as e:
        return Err(_db_mapper.map_exception(e).with_context(origin=origin))


async def update_entity(
    session: AsyncSession,
    entity: T,
    origin: str = "database.update_entity",
) -> Result[T, AppError]:
    """Commit pending changes to an entity and refresh it.

    Returns:
        Ok(entity) on success
        Err(AppError) on failure, after rolling back
    """
    try:
        await session.commit()
        await session.refresh(entity)
        return Ok(entity)
    except SQLAlchemyError as e:
        await session.rollback()
        return Err(_db_mapper.map_exception(e).with_context(origin=origin))
