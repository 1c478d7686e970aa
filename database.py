from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from config import settings


def _get_engine_kwargs(database_url: str):
    """Return dialect-specific engine options for SQLite vs other backends."""
    kwargs = {"echo": settings.debug}
    if database_url.split(":")[0].lower().startswith("sqlite"):
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    return kwargs


def build_engine(database_url: str):
    return create_async_engine(database_url, **_get_engine_kwargs(database_url))


def build_session_factory(bind) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine = build_engine(settings.database_url)

AsyncSessionLocal = build_session_factory(engine)


class Base(DeclarativeBase):
    pass


async def init_db(bind=None):
    import models  # noqa: F401  registers tables on Base.metadata

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
