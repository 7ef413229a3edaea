from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from settlement.balances import deposit
from settlement.db import get_session
from settlement.models import DepositIn

router = APIRouter(prefix="/balances", tags=["balances"])

@router.post("/deposit/{user_id}")
async def deposit_balance(
    user_id: int,
    payload: DepositIn,
    db: AsyncSession = Depends(get_session),
):
    return {"data": await deposit(db, user_id, payload.amount)}
