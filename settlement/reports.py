"""
Read-only rollups over settled jobs.

Only jobs that are paid and carry a payment date contribute. The optional
window is a pair of inclusive calendar dates on ``payment_date``; either
bound can be given on its own. Ties are broken by name so results never
depend on the storage engine's grouping order.
"""
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .db import atomic
from .errors import InvalidDateRangeError, InvalidLimitError
from .models import ClientSpend, ProfessionEarnings
from .tables import contracts, jobs, profiles

DEFAULT_CLIENT_LIMIT = 2


def payment_window(start_date: Optional[date] = None, end_date: Optional[date] = None) -> list:
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError()
    conditions = [jobs.c.paid.is_(True), jobs.c.payment_date.is_not(None)]
    if start_date:
        conditions.append(jobs.c.payment_date >= datetime.combine(start_date, time.min))
    if end_date:
        conditions.append(
            jobs.c.payment_date < datetime.combine(end_date + timedelta(days=1), time.min)
        )
    return conditions


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


async def best_profession(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Optional[ProfessionEarnings]:
    """The contractor profession that earned the most in the window, if any."""
    total = func.sum(jobs.c.price).label("total_earned")
    stmt = (
        select(profiles.c.profession, total)
        .select_from(
            jobs.join(contracts, jobs.c.contract_id == contracts.c.id)
            .join(profiles, contracts.c.contractor_id == profiles.c.id)
        )
        .where(*payment_window(start_date, end_date))
        .group_by(profiles.c.profession)
        .order_by(total.desc(), profiles.c.profession.asc())
        .limit(1)
    )
    async with atomic(db):
        row = (await db.execute(stmt)).mappings().first()
    if row is None:
        return None
    return ProfessionEarnings(profession=row["profession"], total_earned=_money(row["total_earned"]))


async def best_clients(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = DEFAULT_CLIENT_LIMIT,
) -> List[ClientSpend]:
    """Clients ordered by what they paid in the window, highest first."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidLimitError()
    window = payment_window(start_date, end_date)

    total = func.sum(jobs.c.price).label("total_spent")
    stmt = (
        select(
            profiles.c.id,
            profiles.c.first_name,
            profiles.c.last_name,
            profiles.c.type,
            total,
        )
        .select_from(
            jobs.join(contracts, jobs.c.contract_id == contracts.c.id)
            .join(profiles, contracts.c.client_id == profiles.c.id)
        )
        .where(*window)
        .group_by(profiles.c.id, profiles.c.first_name, profiles.c.last_name, profiles.c.type)
        .order_by(
            total.desc(),
            profiles.c.last_name.asc(),
            profiles.c.first_name.asc(),
            profiles.c.id.asc(),
        )
        .limit(limit)
    )
    async with atomic(db):
        rows = (await db.execute(stmt)).mappings().all()
    return [
        ClientSpend(
            client_id=r["id"],
            first_name=r["first_name"],
            last_name=r["last_name"],
            type=r["type"],
            total_spent=_money(r["total_spent"]),
        )
        for r in rows
    ]
