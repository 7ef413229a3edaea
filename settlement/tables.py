"""Ledger schema: profiles, contracts and jobs."""
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    false,
)

metadata = MetaData()

# NUMERIC(12, 2): money never goes through binary floats on a real backend
Money = Numeric(12, 2, asdecimal=True)

profiles = Table(
    "profiles",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("first_name", String(255), nullable=False),
    Column("last_name", String(255), nullable=False),
    Column("profession", String(255), nullable=True),
    Column("balance", Money, nullable=False, server_default="0"),
    Column("type", String(20), nullable=False),
    CheckConstraint("balance >= 0", name="non_negative_balance"),
    CheckConstraint("type IN ('client', 'contractor')", name="valid_profile_type"),
)

contracts = Table(
    "contracts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("terms", Text, nullable=False, server_default=""),
    Column("status", String(20), nullable=False, server_default="new"),
    Column("client_id", Integer, ForeignKey("profiles.id"), nullable=False),
    Column("contractor_id", Integer, ForeignKey("profiles.id"), nullable=True),
    CheckConstraint(
        "status IN ('new', 'in_progress', 'terminated')", name="valid_contract_status"
    ),
    Index("idx_contracts_client", "client_id"),
    Index("idx_contracts_contractor", "contractor_id"),
)

jobs = Table(
    "jobs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("description", Text, nullable=False, server_default=""),
    Column("price", Money, nullable=False),
    Column("paid", Boolean, nullable=False, default=False, server_default=false()),
    Column("payment_date", DateTime(timezone=False), nullable=True),
    Column("contract_id", Integer, ForeignKey("contracts.id"), nullable=False),
    CheckConstraint("price > 0", name="positive_price"),
    CheckConstraint(
        "(paid AND payment_date IS NOT NULL) OR (NOT paid AND payment_date IS NULL)",
        name="paid_has_payment_date",
    ),
    Index("idx_jobs_contract", "contract_id"),
    Index("idx_jobs_payment_date", "payment_date"),
)
