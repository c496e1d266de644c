import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from zonestore.core.config import settings
from zonestore.core.errors import StoreConnectionError
from zonestore.models.record_db import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fixed pool limits: 10 open connections, all of which may sit idle,
# each recycled after one minute.
POOL_OPTIONS = {
    "pool_size": 10,
    "max_overflow": 0,
    "pool_recycle": 60,
}


class LazyResource(Generic[T]):
    """Build a value on first use and share it with every later caller.

    Concurrent first callers wait on a lock so the factory runs once. Only a
    successful build is kept: if the factory raises, the cell stays empty and
    the next call tries again.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._value: Optional[T] = None
        self._lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self._value is not None

    async def get(self) -> T:
        if self._value is None:
            async with self._lock:
                if self._value is None:
                    self._value = await self._factory()
        return self._value

    def reset(self) -> Optional[T]:
        value, self._value = self._value, None
        return value


class ConnectionManager:
    """Owns the pooled engine shared by every zone store operation."""

    def __init__(self, database_url: Optional[str] = None, engine_factory=create_async_engine):
        self.database_url = database_url or settings.DATABASE_URL
        self._engine_factory = engine_factory
        self._engine: LazyResource[AsyncEngine] = LazyResource(self._create_engine)

    async def _create_engine(self) -> AsyncEngine:
        try:
            engine = self._engine_factory(self.database_url, echo=settings.SQL_ECHO, **POOL_OPTIONS)
        except (SQLAlchemyError, ImportError, TypeError, ValueError) as e:
            logger.error(f"Could not create database engine: {e}")
            raise StoreConnectionError(f"Could not create database engine: {e}") from e
        logger.info(f"Database engine created for {make_url(self.database_url).render_as_string(hide_password=True)}")
        return engine

    async def get_engine(self) -> AsyncEngine:
        return await self._engine.get()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        engine = await self.get_engine()
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield session

    async def create_schema(self):
        engine = await self.get_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        engine = self._engine.reset()
        if engine is not None:
            await engine.dispose()
            logger.info("Database engine disposed")
