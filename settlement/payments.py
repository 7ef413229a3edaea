# settlement/payments.py
import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from . import repository
from .db import atomic
from .errors import InsufficientFundsError, NotPayableError
from .models import JobDetail

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    # payment dates are stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def pay_job(db: AsyncSession, job_id: int, client_id: int) -> JobDetail:
    """
    Settle one job: move its price from the client's balance to the
    contractor's and mark it paid, all in a single transaction.

    The job row and both profile rows are locked for the duration of the
    transaction, and every write is conditional on the state that was
    checked, so two concurrent calls for the same job cannot both settle it.

    Raises NotPayableError, InsufficientFundsError or TransientError; none of
    them leaves a partial change behind.
    """
    async with atomic(db):
        job = await repository.find_job_for_payment(db, job_id)
        if job is None:
            raise NotPayableError(job_id, "missing")
        if job["client_id"] != client_id:
            raise NotPayableError(job_id, "foreign")
        if job["paid"]:
            raise NotPayableError(job_id, "already_paid")
        contractor_id = job["contractor_id"]
        if contractor_id is None:
            raise NotPayableError(job_id, "no_contractor")

        price = job["price"]
        parties = await repository.lock_profiles(db, [client_id, contractor_id])
        if client_id not in parties or contractor_id not in parties:
            raise NotPayableError(job_id, "no_contractor")
        if parties[client_id].balance < price:
            logger.info(
                "job %s not paid: client %s balance %s below price %s",
                job_id, client_id, parties[client_id].balance, price,
            )
            raise InsufficientFundsError()

        if not await repository.mark_job_paid(db, job_id, utcnow()):
            raise NotPayableError(job_id, "already_paid")
        if not await repository.debit(db, client_id, price):
            raise InsufficientFundsError()
        await repository.credit(db, contractor_id, price)

        # read back inside the transaction so callers see post-transfer balances
        settled = await repository.get_job_detail(db, job_id)

    logger.info("job %s paid: %s moved from client %s to contractor %s",
                job_id, price, client_id, contractor_id)
    return settled
