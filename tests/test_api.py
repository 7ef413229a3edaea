"""
HTTP surface tests against the demo ledger.
"""
from decimal import Decimal

import pytest
import pytest_asyncio

from settlement.seed import seed


def money(value) -> Decimal:
    return Decimal(str(value))


@pytest_asyncio.fixture
async def seeded(session_factory):
    async with session_factory() as session:
        await seed(session)


@pytest.mark.asyncio
async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"health": "OK"}


@pytest.mark.asyncio
async def test_health_db(client) -> None:
    response = await client.get("/health/db")

    assert response.json() == {"db": 1}


@pytest.mark.asyncio
async def test_profile_header_required(client, seeded) -> None:
    missing = await client.get("/contracts")
    unknown = await client.get("/contracts", headers={"profile_id": "99"})

    assert missing.status_code == 401
    assert missing.json()["error"] == "unauthorized"
    assert unknown.status_code == 401
    assert unknown.json()["error"] == "unauthorized"


@pytest.mark.asyncio
async def test_unknown_endpoint(client) -> None:
    response = await client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_contract_visible_to_its_parties_only(client, seeded) -> None:
    own = await client.get("/contracts/1", headers={"profile_id": "1"})
    as_contractor = await client.get("/contracts/1", headers={"profile_id": "5"})
    foreign = await client.get("/contracts/1", headers={"profile_id": "2"})

    assert own.status_code == 200
    assert own.json()["data"]["status"] == "terminated"
    assert as_contractor.status_code == 200
    assert foreign.status_code == 404
    assert foreign.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_list_contracts_skips_terminated(client, seeded) -> None:
    client_view = await client.get("/contracts", headers={"profile_id": "1"})
    contractor_view = await client.get("/contracts", headers={"profile_id": "6"})

    assert [c["id"] for c in client_view.json()["data"]] == [2]
    assert [c["id"] for c in contractor_view.json()["data"]] == [2, 3, 8]


@pytest.mark.asyncio
async def test_unpaid_jobs_on_active_contracts(client, seeded) -> None:
    response = await client.get("/jobs/unpaid", headers={"profile_id": "1"})

    jobs = response.json()["data"]
    assert [j["id"] for j in jobs] == [2]
    assert jobs[0]["paid"] is False
    assert jobs[0]["paymentDate"] is None


@pytest.mark.asyncio
async def test_pay_job_returns_fresh_balances(client, seeded) -> None:
    response = await client.post("/jobs/2/pay", headers={"profile_id": "1"})

    assert response.status_code == 200
    job = response.json()["data"]
    assert job["paid"] is True
    assert job["paymentDate"] is not None
    assert money(job["contract"]["client"]["balance"]) == Decimal("949")
    assert money(job["contract"]["contractor"]["balance"]) == Decimal("1415")
    # money goes over the wire as exact decimal strings
    assert job["price"] == "201.00"
    assert job["contract"]["client"]["balance"] == "949.00"


@pytest.mark.asyncio
async def test_pay_job_errors(client, seeded) -> None:
    poor = await client.post("/jobs/5/pay", headers={"profile_id": "4"})
    paid = await client.post("/jobs/6/pay", headers={"profile_id": "4"})
    foreign = await client.post("/jobs/2/pay", headers={"profile_id": "2"})

    assert poor.status_code == 400
    assert poor.json()["error"] == "insufficient_funds"
    assert paid.status_code == 409
    assert paid.json()["error"] == "not_payable"
    assert foreign.status_code == 409


@pytest.mark.asyncio
async def test_deposit(client, seeded) -> None:
    # client 1 owes 401 on unpaid jobs, so the ceiling is 100.25
    ok = await client.post("/balances/deposit/1", json={"amount": "50"})
    capped = await client.post("/balances/deposit/1", json={"amount": "100.25"})

    assert ok.status_code == 200
    assert money(ok.json()["data"]["balance"]) == Decimal("1200")
    assert capped.status_code == 400
    assert capped.json()["error"] == "deposit_cap_exceeded"


@pytest.mark.asyncio
async def test_deposit_errors(client, seeded) -> None:
    missing = await client.post("/balances/deposit/99", json={"amount": "1"})
    negative = await client.post("/balances/deposit/1", json={"amount": "-1"})
    contractor = await client.post("/balances/deposit/6", json={"amount": "1"})

    assert missing.status_code == 404
    assert negative.json()["error"] == "invalid_amount"
    assert contractor.json()["error"] == "deposit_cap_exceeded"


@pytest.mark.asyncio
async def test_best_profession(client, seeded) -> None:
    everything = await client.get("/admin/best-profession")
    one_day = await client.get(
        "/admin/best-profession", params={"startDate": "2020-08-15", "endDate": "2020-08-15"}
    )

    assert everything.json()["data"]["profession"] == "Programmer"
    assert money(everything.json()["data"]["totalEarned"]) == Decimal("2683")
    assert money(one_day.json()["data"]["totalEarned"]) == Decimal("2362")


@pytest.mark.asyncio
async def test_best_profession_bad_range(client, seeded) -> None:
    reversed_range = await client.get(
        "/admin/best-profession", params={"startDate": "2020-08-16", "endDate": "2020-08-15"}
    )
    malformed = await client.get("/admin/best-profession", params={"startDate": "yesterday"})

    assert reversed_range.status_code == 400
    assert reversed_range.json()["error"] == "invalid_date_range"
    assert malformed.status_code == 422
    assert malformed.json()["error"] == "invalid_request"


@pytest.mark.asyncio
async def test_best_clients(client, seeded) -> None:
    default = await client.get("/admin/best-clients")
    three = await client.get("/admin/best-clients", params={"limit": 3})
    invalid = await client.get("/admin/best-clients", params={"limit": 0})

    top = default.json()["data"]
    assert [(c["clientId"], c["firstName"]) for c in top] == [(4, "Ash"), (1, "Harry")]
    assert money(top[0]["totalSpent"]) == Decimal("2020")
    assert [c["clientId"] for c in three.json()["data"]] == [4, 1, 2]
    assert invalid.status_code == 400
    assert invalid.json()["error"] == "invalid_limit"
