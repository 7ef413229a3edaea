import logging
import os
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from .errors import LedgerError, TransientError
from .tables import metadata

log = logging.getLogger(__name__)

_engine = None
_SessionLocal = None

def _ensure_engine():
    global _engine, _SessionLocal
    if _engine is None:
        db_url = os.getenv("DATABASE_URL")
        if not db_url:
            # defer failure until a DB-using endpoint is called
            raise RuntimeError("DATABASE_URL is not set")
        _engine = create_async_engine(
            db_url,
            echo=os.getenv("DATABASE_ECHO", "0") == "1",
            pool_size=int(os.getenv("DATABASE_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DATABASE_MAX_OVERFLOW", "10")),
            pool_pre_ping=True,
        )
        _SessionLocal = async_sessionmaker(_engine, expire_on_commit=False)

async def get_session() -> AsyncSession:
    _ensure_engine()
    async with _SessionLocal() as session:
        yield session

async def init_db():
    _ensure_engine()
    async with _engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

async def close_db():
    global _engine, _SessionLocal
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _SessionLocal = None

@asynccontextmanager
async def atomic(session: AsyncSession):
    """
    Run the block as one unit of work on ``session``.

    With no transaction open, the block gets its own transaction and is
    committed on exit. If the caller already has one open, the block runs
    inside a savepoint: the caller's pending work is neither committed nor
    lost, and the caller still owns the final commit.

    Anything raised inside rolls the block back. Ledger errors propagate
    unchanged; store failures become a retryable TransientError and the
    driver detail only goes to the log.
    """
    try:
        if session.in_transaction():
            async with session.begin_nested():
                yield session
        else:
            async with session.begin():
                yield session
    except LedgerError:
        raise
    except SQLAlchemyError as e:
        log.exception("ledger transaction rolled back: %s", e.__class__.__name__)
        raise TransientError() from e
