from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker
from release_builder.core.config import settings  # where DATABASE_URL lives


def async_database_url(url: str) -> str:
    """Plain postgresql:// URLs (as handed out by most hosts) need the asyncpg driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


engine = create_async_engine(async_database_url(settings.DATABASE_URL), echo=settings.DATABASE_ECHO)
SessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


if engine.dialect.name == "sqlite":
    # SQLite ignores foreign keys unless asked per connection
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


async def get_db() -> AsyncSession:
    """
    Request scoped session. Commits when the request succeeds, rolls back
    when anything raises.

    Usage:
        @router.get("/releases/{release_id}")
        async def get_release(release_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
            return await ReleaseService(db).get_release(release_id)
    """
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
