# DB connections

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.config import settings


def build_engine(url: str, echo: bool = False):
    """Create an async engine; SQLite gets a single shared connection"""
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False}
        )

    return create_async_engine(
        url,
        echo=echo,
        pool_size=20,
        max_overflow=0
    )


async_engine = build_engine(settings.database_url, echo=settings.debug)

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db() -> AsyncSession:
    """Dependency for getting async database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables(engine=async_engine):
    """Create all tables (dev/test only, Alembic owns production schema)"""
    from app.models.base import Base
    import app.models.event  # noqa: F401
    import app.models.project  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
