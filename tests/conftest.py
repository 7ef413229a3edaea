"""
Pytest configuration and fixtures.

Each test gets a fresh SQLite file. The pool holds a single connection, so
concurrent sessions queue for it the way row locks make concurrent
transactions queue on PostgreSQL.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from settlement.db import get_session
from settlement.main import app
from settlement.tables import contracts, jobs, metadata, profiles


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, Any]:
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        poolclass=AsyncAdaptedQueuePool,
        pool_size=1,
        max_overflow=0,
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, Any]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, Any]:
    async def _session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class LedgerBuilder:
    """Inserts rows directly so tests can arrange any ledger state."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory
        self._ids = {"profiles": 0, "contracts": 0, "jobs": 0}

    def _next(self, table: str) -> int:
        self._ids[table] += 1
        return self._ids[table]

    async def _insert(self, table, values: dict) -> int:
        async with self.session_factory() as session:
            await session.execute(insert(table).values(**values))
            await session.commit()
        return values["id"]

    async def client(self, balance="0", first_name="Client", last_name=None) -> int:
        pid = self._next("profiles")
        return await self._insert(profiles, dict(
            id=pid, first_name=first_name, last_name=last_name or f"Number{pid}",
            profession="Buyer", balance=Decimal(balance), type="client",
        ))

    async def contractor(self, profession="Programmer", balance="0") -> int:
        pid = self._next("profiles")
        return await self._insert(profiles, dict(
            id=pid, first_name="Contractor", last_name=f"Number{pid}",
            profession=profession, balance=Decimal(balance), type="contractor",
        ))

    async def contract(self, client_id: int, contractor_id: Optional[int], status="in_progress") -> int:
        return await self._insert(contracts, dict(
            id=self._next("contracts"), terms="terms", status=status,
            client_id=client_id, contractor_id=contractor_id,
        ))

    async def job(self, contract_id: int, price, paid_at: Optional[datetime] = None) -> int:
        return await self._insert(jobs, dict(
            id=self._next("jobs"), description="work", price=Decimal(price),
            contract_id=contract_id, paid=paid_at is not None, payment_date=paid_at,
        ))

    async def balance(self, profile_id: int) -> Decimal:
        async with self.session_factory() as session:
            value = (await session.execute(
                select(profiles.c.balance).where(profiles.c.id == profile_id)
            )).scalar_one()
        return Decimal(str(value)).quantize(Decimal("0.01"))

    async def job_row(self, job_id: int):
        async with self.session_factory() as session:
            return (await session.execute(
                select(jobs).where(jobs.c.id == job_id)
            )).mappings().one()


@pytest.fixture
def ledger(session_factory) -> LedgerBuilder:
    return LedgerBuilder(session_factory)
