"""
Explicit statements over the ledger tables.

Every function takes the caller's session and runs inside whatever
transaction the caller opened; nothing here commits. Writes are
conditional updates whose rowcount tells the caller whether the guarded
state still held when the row was touched.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    Contract,
    ContractDetail,
    ContractStatus,
    Job,
    JobDetail,
    Profile,
    row_to_contract,
    row_to_job,
    row_to_profile,
)
from .tables import contracts, jobs, profiles


async def get_profile(db: AsyncSession, profile_id: int, lock: bool = False) -> Optional[Profile]:
    stmt = select(profiles).where(profiles.c.id == profile_id)
    if lock:
        stmt = stmt.with_for_update()
    row = (await db.execute(stmt)).mappings().first()
    return row_to_profile(row) if row else None


async def lock_profiles(db: AsyncSession, profile_ids: Iterable[int]) -> Dict[int, Profile]:
    # ascending id order so two settlements never wait on each other in a cycle
    stmt = (
        select(profiles)
        .where(profiles.c.id.in_(sorted(set(profile_ids))))
        .order_by(profiles.c.id)
        .with_for_update()
    )
    rows = (await db.execute(stmt)).mappings().all()
    return {row["id"]: row_to_profile(row) for row in rows}


async def find_job_for_payment(db: AsyncSession, job_id: int) -> Optional[RowMapping]:
    """Job row joined with its contract parties, locked for update."""
    stmt = (
        select(
            jobs.c.id,
            jobs.c.price,
            jobs.c.paid,
            contracts.c.client_id,
            contracts.c.contractor_id,
        )
        .select_from(jobs.join(contracts, jobs.c.contract_id == contracts.c.id))
        .where(jobs.c.id == job_id)
        .with_for_update(of=jobs)
    )
    return (await db.execute(stmt)).mappings().first()


async def mark_job_paid(db: AsyncSession, job_id: int, paid_at: datetime) -> bool:
    # compare-and-swap on paid: only one writer can flip it
    result = await db.execute(
        update(jobs)
        .where(jobs.c.id == job_id, jobs.c.paid.is_(False))
        .values(paid=True, payment_date=paid_at)
    )
    return result.rowcount == 1


async def debit(db: AsyncSession, profile_id: int, amount: Decimal) -> bool:
    result = await db.execute(
        update(profiles)
        .where(profiles.c.id == profile_id, profiles.c.balance >= amount)
        .values(balance=profiles.c.balance - amount)
    )
    return result.rowcount == 1


async def credit(db: AsyncSession, profile_id: int, amount: Decimal) -> bool:
    result = await db.execute(
        update(profiles)
        .where(profiles.c.id == profile_id)
        .values(balance=profiles.c.balance + amount)
    )
    return result.rowcount == 1


async def payable_total(db: AsyncSession, client_id: int) -> Decimal:
    """Sum of prices of the client's unpaid jobs, on contracts of any status."""
    stmt = (
        select(func.coalesce(func.sum(jobs.c.price), 0))
        .select_from(jobs.join(contracts, jobs.c.contract_id == contracts.c.id))
        .where(contracts.c.client_id == client_id, jobs.c.paid.is_(False))
    )
    total = (await db.execute(stmt)).scalar_one()
    return Decimal(str(total)).quantize(Decimal("0.01"))


async def get_job_detail(db: AsyncSession, job_id: int) -> Optional[JobDetail]:
    client = profiles.alias("client")
    contractor = profiles.alias("contractor")
    stmt = (
        select(
            jobs,
            contracts.c.terms.label("contract_terms"),
            contracts.c.status.label("contract_status"),
            contracts.c.client_id,
            contracts.c.contractor_id,
            *[c.label(f"client__{c.name}") for c in client.c],
            *[c.label(f"contractor__{c.name}") for c in contractor.c],
        )
        .select_from(
            jobs.join(contracts, jobs.c.contract_id == contracts.c.id)
            .join(client, contracts.c.client_id == client.c.id)
            .outerjoin(contractor, contracts.c.contractor_id == contractor.c.id)
        )
        .where(jobs.c.id == job_id)
    )
    row = (await db.execute(stmt)).mappings().first()
    if row is None:
        return None
    contract = ContractDetail(
        id=row["contract_id"],
        terms=row["contract_terms"],
        status=row["contract_status"],
        client_id=row["client_id"],
        contractor_id=row["contractor_id"],
        client=row_to_profile(row, "client__"),
        contractor=row_to_profile(row, "contractor__") if row["contractor_id"] is not None else None,
    )
    job = row_to_job(row)
    return JobDetail(**job.model_dump(), contract=contract)


def _party_of(profile_id: int):
    return or_(contracts.c.client_id == profile_id, contracts.c.contractor_id == profile_id)


async def get_contract_for_party(db: AsyncSession, contract_id: int, profile_id: int) -> Optional[Contract]:
    stmt = select(contracts).where(contracts.c.id == contract_id, _party_of(profile_id))
    row = (await db.execute(stmt)).mappings().first()
    return row_to_contract(row) if row else None


async def active_contracts_for_party(db: AsyncSession, profile_id: int) -> List[Contract]:
    stmt = (
        select(contracts)
        .where(_party_of(profile_id), contracts.c.status != ContractStatus.terminated.value)
        .order_by(contracts.c.id)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [row_to_contract(r) for r in rows]


async def unpaid_jobs_for_party(db: AsyncSession, profile_id: int) -> List[Job]:
    stmt = (
        select(jobs)
        .select_from(jobs.join(contracts, jobs.c.contract_id == contracts.c.id))
        .where(
            and_(
                _party_of(profile_id),
                contracts.c.status != ContractStatus.terminated.value,
                jobs.c.paid.is_(False),
            )
        )
        .order_by(jobs.c.id)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [row_to_job(r) for r in rows]
