from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from settlement.db import get_session
from settlement.reports import DEFAULT_CLIENT_LIMIT, best_clients, best_profession

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/best-profession")
async def read_best_profession(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    db: AsyncSession = Depends(get_session),
):
    return {"data": await best_profession(db, start_date, end_date)}

@router.get("/best-clients")
async def read_best_clients(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    limit: int = Query(default=DEFAULT_CLIENT_LIMIT),
    db: AsyncSession = Depends(get_session),
):
    return {"data": await best_clients(db, start_date, end_date, limit)}
