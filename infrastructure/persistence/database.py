import logging
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from infrastructure.persistence.models.key_value import Base

logger = logging.getLogger(__name__)


def _ensure_sqlite_parent(db_url: str) -> None:
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


class Database:
    """Async engine for the on-device store."""

    def __init__(self, db_url: str, echo: bool = False):
        _ensure_sqlite_parent(db_url)
        self.url = db_url
        self.engine = create_async_engine(db_url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    async def open(cls, db_url: str, echo: bool = False) -> "Database":
        database = cls(db_url, echo=echo)
        await database.create_tables()
        logger.info("Local store opened at %s", make_url(db_url).database)
        return database

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self):
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
