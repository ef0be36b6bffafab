from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings

settings = get_settings()

# Waiting for a pooled connection counts against the same budget as a storage call.
engine = create_async_engine(
    settings.database_url,
    echo=settings.echo_sql,
    pool_pre_ping=True,
    pool_recycle=3600,
    pool_timeout=settings.storage_timeout_seconds,
)

async_session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
