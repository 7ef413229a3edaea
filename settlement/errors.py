# settlement/errors.py
from typing import Optional


class LedgerError(Exception):
    """Base for every failure the ledger reports to callers."""

    kind = "ledger_error"
    status_code = 400
    message = "Ledger operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class NotFoundError(LedgerError):
    kind = "not_found"
    status_code = 404
    message = "Entity not found"


class NotPayableError(LedgerError):
    """
    The job does not exist, belongs to another client, is already paid or
    has no contractor. Callers get one kind; ``reason`` keeps the cause.
    """

    kind = "not_payable"
    status_code = 409
    message = "Job either does not exist, does not belong to that client or has already been paid"

    def __init__(self, job_id: int, reason: str):
        super().__init__()
        self.job_id = job_id
        self.reason = reason


class InsufficientFundsError(LedgerError):
    kind = "insufficient_funds"
    message = "Client balance does not have sufficient funds to perform this operation"


class InvalidAmountError(LedgerError):
    kind = "invalid_amount"
    message = "Amount must be a positive number with at most two decimal places"


class DepositCapExceededError(LedgerError):
    kind = "deposit_cap_exceeded"

    def __init__(self, amount, ceiling):
        super().__init__(
            f"The amount to deposit {amount} must be less than 25% of the total jobs payable amount"
        )
        self.amount = amount
        self.ceiling = ceiling


class InvalidDateRangeError(LedgerError):
    kind = "invalid_date_range"
    message = "startDate must not be after endDate"


class InvalidLimitError(LedgerError):
    kind = "invalid_limit"
    message = "limit must be a positive integer"


class TransientError(LedgerError):
    kind = "transient"
    status_code = 503
    message = "The ledger is temporarily unavailable, retry the request"
