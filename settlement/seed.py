"""
Demo ledger: a handful of clients, contractors, contracts and jobs.

    DATABASE_URL=sqlite+aiosqlite:///./ledger.db python -m settlement.seed
"""
import asyncio
import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import delete, insert
from sqlalchemy.ext.asyncio import AsyncSession

from . import db as ledger_db
from .tables import contracts, jobs, profiles

log = logging.getLogger(__name__)

PROFILES = [
    (1, "Harry", "Potter", "Wizard", "1150", "client"),
    (2, "Mr", "Robot", "Hacker", "231.11", "client"),
    (3, "John", "Snow", "Knows nothing", "451.3", "client"),
    (4, "Ash", "Kethcum", "Pokemon master", "1.3", "client"),
    (5, "John", "Lenon", "Musician", "64", "contractor"),
    (6, "Linus", "Torvalds", "Programmer", "1214", "contractor"),
    (7, "Alan", "Turing", "Programmer", "22", "contractor"),
    (8, "Aragorn", "II Elessar Telcontarvalds", "Fighter", "314", "contractor"),
]

# (id, status, client, contractor)
CONTRACTS = [
    (1, "terminated", 1, 5),
    (2, "in_progress", 1, 6),
    (3, "in_progress", 2, 6),
    (4, "in_progress", 2, 7),
    (5, "new", 3, 8),
    (6, "in_progress", 3, 7),
    (7, "in_progress", 4, 7),
    (8, "in_progress", 4, 6),
    (9, "in_progress", 4, 8),
]

# (id, price, contract, payment date or None)
JOBS = [
    (1, "200", 1, None),
    (2, "201", 2, None),
    (3, "202", 3, None),
    (4, "200", 4, None),
    (5, "200", 7, None),
    (6, "2020", 7, datetime(2020, 8, 15, 19, 11, 26)),
    (7, "200", 2, datetime(2020, 8, 15, 19, 11, 26)),
    (8, "200", 3, datetime(2020, 8, 16, 19, 11, 26)),
    (9, "200", 1, datetime(2020, 8, 17, 19, 11, 26)),
    (10, "200", 5, datetime(2020, 8, 17, 19, 11, 26)),
    (11, "21", 1, datetime(2020, 8, 10, 19, 11, 26)),
    (12, "21", 2, datetime(2020, 8, 15, 19, 11, 26)),
    (13, "121", 3, datetime(2020, 8, 15, 19, 11, 26)),
    (14, "121", 3, datetime(2020, 8, 14, 23, 11, 26)),
]


async def seed(db: AsyncSession) -> None:
    """Replace the ledger's contents with the demo data and commit."""
    await db.execute(delete(jobs))
    await db.execute(delete(contracts))
    await db.execute(delete(profiles))
    await db.execute(insert(profiles), [
        dict(id=i, first_name=f, last_name=l, profession=p, balance=Decimal(b), type=t)
        for i, f, l, p, b, t in PROFILES
    ])
    await db.execute(insert(contracts), [
        dict(id=i, terms="bla bla bla", status=s, client_id=c, contractor_id=k)
        for i, s, c, k in CONTRACTS
    ])
    await db.execute(insert(jobs), [
        dict(id=i, description="work", price=Decimal(p), contract_id=c,
             paid=paid_at is not None, payment_date=paid_at)
        for i, p, c, paid_at in JOBS
    ])
    await db.commit()
    log.info("seeded %d profiles, %d contracts, %d jobs", len(PROFILES), len(CONTRACTS), len(JOBS))


async def main():
    await ledger_db.init_db()
    async for session in ledger_db.get_session():
        await seed(session)
    await ledger_db.close_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
