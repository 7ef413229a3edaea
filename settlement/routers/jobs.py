from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from settlement.contracts import list_unpaid_jobs
from settlement.db import get_session
from settlement.deps import get_profile
from settlement.models import Profile
from settlement.payments import pay_job

router = APIRouter(prefix="/jobs", tags=["jobs"])

@router.get("/unpaid")
async def read_unpaid_jobs(
    db: AsyncSession = Depends(get_session),
    profile: Profile = Depends(get_profile),
):
    return {"data": await list_unpaid_jobs(db, profile.id)}

@router.post("/{job_id}/pay")
async def pay(
    job_id: int,
    db: AsyncSession = Depends(get_session),
    profile: Profile = Depends(get_profile),
):
    # the caller pays for its own job; balance checks happen under lock
    return {"data": await pay_job(db, job_id, profile.id)}
