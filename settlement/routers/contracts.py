from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from settlement.contracts import get_contract, list_contracts
from settlement.db import get_session
from settlement.deps import get_profile
from settlement.models import Profile

router = APIRouter(prefix="/contracts", tags=["contracts"])

@router.get("/{contract_id}")
async def read_contract(
    contract_id: int,
    db: AsyncSession = Depends(get_session),
    profile: Profile = Depends(get_profile),
):
    return {"data": await get_contract(db, contract_id, profile.id)}

@router.get("")
async def read_contracts(
    db: AsyncSession = Depends(get_session),
    profile: Profile = Depends(get_profile),
):
    return {"data": await list_contracts(db, profile.id)}
