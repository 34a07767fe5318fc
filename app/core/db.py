# app/core/db.py

import ssl
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import (
    APP_ENV,
    DATABASE_URL,
    DB_ECHO_POOL,
    DB_MAX_OVERFLOW,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
    DB_SSL_VERIFY,
    DB_TYPE,
)

Base = declarative_base()


# =====================================================
# ENGINE
# =====================================================
def _engine_options(db_type: str) -> dict:
    if db_type == "sqlite":
        return {"connect_args": {"check_same_thread": False}}

    ssl_ctx = ssl.create_default_context()
    if not DB_SSL_VERIFY:
        ssl_ctx.check_hostname = False
        ssl_ctx.verify_mode = ssl.CERT_NONE

    return {
        "connect_args": {
            "ssl": ssl_ctx,
            # Prepared statements break behind pgbouncer transaction pooling
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
        },
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
        "pool_timeout": DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }


engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    echo_pool=DB_ECHO_POOL,
    **_engine_options(DB_TYPE),
)


def enable_sqlite_foreign_keys(dbapi_connection, _):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if DB_TYPE == "sqlite":
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)


# =====================================================
# SESSIONS
# =====================================================
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block as one transaction on the given session.

    Commits only when the block exits normally; any exception rolls back
    every write made inside the block and is re-raised unchanged.
    """
    # Reads made earlier in the request (the auth guard's company lookup)
    # autobegin a transaction holding no writes; end it so the unit starts clean
    if db.in_transaction():
        await db.commit()

    async with db.begin():
        yield db


# Registers every table on Base.metadata
import app.models  # noqa: E402,F401


async def init_models():
    """Create missing tables. Schema changes elsewhere go through migrations."""
    if APP_ENV not in {"development", "test"}:
        raise RuntimeError("init_models() is only allowed in development and test")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
