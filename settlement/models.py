# settlement/models.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


# money leaves the API as an exact two-place decimal string, never a float
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: f"{v:.2f}", return_type=str, when_used="json"),
]


class ProfileType(str, Enum):
    client = "client"
    contractor = "contractor"


class ContractStatus(str, Enum):
    new = "new"
    in_progress = "in_progress"
    terminated = "terminated"


class Record(BaseModel):
    # read-only snapshots of rows; persistence only happens through the repository
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Profile(Record):
    id: int
    first_name: str
    last_name: str
    profession: Optional[str] = None
    balance: Money
    type: ProfileType


class Contract(Record):
    id: int
    terms: str = ""
    status: ContractStatus
    client_id: int
    contractor_id: Optional[int] = None


class Job(Record):
    id: int
    description: str = ""
    price: Money
    paid: bool = False
    payment_date: Optional[datetime] = None
    contract_id: int


class ContractDetail(Contract):
    client: Profile
    contractor: Optional[Profile] = None


class JobDetail(Job):
    """A job with its contract and both parties as they are after settlement."""

    contract: ContractDetail


class ProfessionEarnings(Record):
    profession: Optional[str]
    total_earned: Money


class ClientSpend(Record):
    client_id: int
    first_name: str
    last_name: str
    type: ProfileType
    total_spent: Money


class DepositIn(BaseModel):
    amount: Decimal


def row_to_profile(row: Mapping[str, Any], prefix: str = "") -> Profile:
    return Profile(
        id=row[f"{prefix}id"],
        first_name=row[f"{prefix}first_name"],
        last_name=row[f"{prefix}last_name"],
        profession=row[f"{prefix}profession"],
        balance=row[f"{prefix}balance"],
        type=row[f"{prefix}type"],
    )


def row_to_contract(row: Mapping[str, Any]) -> Contract:
    return Contract(
        id=row["id"],
        terms=row["terms"],
        status=row["status"],
        client_id=row["client_id"],
        contractor_id=row["contractor_id"],
    )


def row_to_job(row: Mapping[str, Any]) -> Job:
    return Job(
        id=row["id"],
        description=row["description"],
        price=row["price"],
        paid=bool(row["paid"]),
        payment_date=row["payment_date"],
        contract_id=row["contract_id"],
    )
