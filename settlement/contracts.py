# settlement/contracts.py
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from . import repository
from .db import atomic
from .errors import NotFoundError
from .models import Contract, Job


async def get_contract(db: AsyncSession, contract_id: int, profile_id: int) -> Contract:
    """Return the contract only if the calling profile is one of its parties."""
    async with atomic(db):
        contract = await repository.get_contract_for_party(db, contract_id, profile_id)
    if contract is None:
        raise NotFoundError(f"Contract {contract_id} not found")
    return contract


async def list_contracts(db: AsyncSession, profile_id: int) -> List[Contract]:
    async with atomic(db):
        return await repository.active_contracts_for_party(db, profile_id)


async def list_unpaid_jobs(db: AsyncSession, profile_id: int) -> List[Job]:
    """Unpaid jobs on the profile's contracts that are not terminated."""
    async with atomic(db):
        return await repository.unpaid_jobs_for_party(db, profile_id)
