# settlement/deps.py
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from . import repository
from .db import atomic, get_session
from .models import Profile


async def get_profile(
    profile_id: Optional[int] = Header(default=None, convert_underscores=False),
    db: AsyncSession = Depends(get_session),
) -> Profile:
    """Resolve the calling profile from the ``profile_id`` header."""
    if profile_id is None:
        raise HTTPException(status_code=401, detail="Missing profile_id header")
    async with atomic(db):
        profile = await repository.get_profile(db, profile_id)
    if profile is None:
        raise HTTPException(status_code=401, detail="Unknown profile")
    return profile
