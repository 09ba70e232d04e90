# rental_quotes/core/db.py
import ssl
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from rental_quotes.core.config import Settings

Base = declarative_base()


class Database:
    """
    Owns the async engine and session factory for one application instance.
    Built by the app factory and kept on ``app.state.db``.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        engine_kwargs = {"echo": settings.db_echo, "future": True}

        if not settings.is_sqlite:
            # PgBouncer-safe: no prepared statements
            connect_args = {
                "statement_cache_size": 0,
                "prepared_statement_cache_size": 0,
            }
            if settings.db_ssl:
                ssl_ctx = ssl.create_default_context()
                ssl_ctx.check_hostname = False
                ssl_ctx.verify_mode = ssl.CERT_NONE
                connect_args["ssl"] = ssl_ctx
            engine_kwargs.update(pool_size=5, max_overflow=10, connect_args=connect_args)
        else:
            # writers queue on the lock instead of failing with "database is locked"
            engine_kwargs.update(connect_args={"timeout": settings.db_busy_timeout})

        self.engine = create_async_engine(settings.database_url, **engine_kwargs)

        if settings.is_sqlite:
            _configure_sqlite(self.engine)

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def init_models(self):
        import rental_quotes.models  # noqa: F401  (register tables on Base.metadata)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()


def _configure_sqlite(engine):
    # pysqlite's implicit transaction handling breaks SAVEPOINT; emit BEGIN ourselves.
    # IMMEDIATE takes the write lock up front, so FOR UPDATE readers cannot
    # deadlock upgrading a shared lock and requests run one writer at a time.
    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# -----------------------
# FastAPI dependency
# -----------------------
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
