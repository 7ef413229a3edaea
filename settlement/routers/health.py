from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from settlement.db import get_session

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health():
    return {"health": "OK"}

@router.get("/db")
async def health_db(db: AsyncSession = Depends(get_session)):
    try:
        result = await db.execute(text("select 1"))
        return {"db": result.scalar_one()}
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"DB check failed: {e.__class__.__name__}")
