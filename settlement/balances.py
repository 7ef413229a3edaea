# settlement/balances.py
import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.ext.asyncio import AsyncSession

from . import repository
from .db import atomic
from .errors import DepositCapExceededError, InvalidAmountError, NotFoundError
from .models import Profile

logger = logging.getLogger(__name__)

# a deposit must stay strictly below this share of the client's unpaid jobs
DEPOSIT_CAP_RATIO = Decimal("0.25")
CENT = Decimal("0.01")


def validate_amount(amount) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidAmountError()
    try:
        value = Decimal(str(amount))
        if not value.is_finite() or value <= 0 or value != value.quantize(CENT):
            raise InvalidAmountError()
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError()
    return value


async def deposit(db: AsyncSession, profile_id: int, amount) -> Profile:
    """Credit ``amount`` to a profile, capped by 25% of what it still owes."""
    value = validate_amount(amount)

    async with atomic(db):
        profile = await repository.get_profile(db, profile_id, lock=True)
        if profile is None:
            raise NotFoundError(f"Profile {profile_id} does not exist")

        ceiling = await repository.payable_total(db, profile_id) * DEPOSIT_CAP_RATIO
        if value >= ceiling:
            logger.info("deposit of %s to profile %s rejected, ceiling %s", value, profile_id, ceiling)
            raise DepositCapExceededError(value, ceiling)

        await repository.credit(db, profile_id, value)
        updated = await repository.get_profile(db, profile_id)

    logger.info("deposited %s to profile %s", value, profile_id)
    return updated
