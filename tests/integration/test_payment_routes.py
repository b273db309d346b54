from datetime import date
from decimal import Decimal

import pytest

from payledger.infrastructure.db.repositories.obligation_repository import ObligationRepository


async def _seed(db_session, *amounts: str):
    repo = ObligationRepository(db_session)
    created = []
    for i, amount in enumerate(amounts):
        created.append(await repo.create(
            label=f"Obligation {i + 1}",
            occurred_on=date(2024, 1, i + 1),
            amount=Decimal(amount),
        ))
    await db_session.commit()
    return created


async def _statuses(client):
    response = await client.get("/api/v1/obligations")
    return [o["status"] for o in response.json()]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_exact_payment_settles_single(client, db_session):
    await _seed(db_session, "100.00")

    response = await client.post("/api/v1/payments", json={"amount": "100.00"})

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "SETTLED"
    assert body["settled_count"] == 1
    assert Decimal(body["remaining_amount"]) == Decimal("0")
    assert body["required_amount"] is None
    assert "Payment accepted" in body["message"]
    assert await _statuses(client) == ["SETTLED"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_exact_payment_settles_two_oldest(client, db_session):
    created = await _seed(db_session, "100.00", "200.00", "75.00")

    response = await client.post("/api/v1/payments", json={"amount": "300.00"})

    assert response.status_code == 200
    assert response.json()["settled_ids"] == [created[0].id, created[1].id]
    assert await _statuses(client) == ["SETTLED", "SETTLED", "OUTSTANDING"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_excess_payment_rejected(client, db_session):
    await _seed(db_session, "100.00", "200.00")

    response = await client.post("/api/v1/payments", json={"amount": "150.00"})

    assert response.status_code == 422
    body = response.json()
    assert body["category"] == "REJECTED_EXCESS"
    assert body["settled_count"] == 0
    assert Decimal(body["required_amount"]) == Decimal("100.00")
    assert "exceeds the exact amount required of $100.00" in body["message"]
    assert await _statuses(client) == ["OUTSTANDING", "OUTSTANDING"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_insufficient_payment_rejected(client, db_session):
    await _seed(db_session, "100.00")

    response = await client.post("/api/v1/payments", json={"amount": "50.00"})

    assert response.status_code == 400
    body = response.json()
    assert body["category"] == "REJECTED_INSUFFICIENT"
    assert Decimal(body["required_amount"]) == Decimal("100.00")
    assert Decimal(body["remaining_amount"]) == Decimal("50.00")
    assert await _statuses(client) == ["OUTSTANDING"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_nothing_to_pay(client):
    response = await client.post("/api/v1/payments", json={"amount": "75.00"})

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "NOTHING_TO_PAY"
    assert body["required_amount"] is None
    assert Decimal(body["remaining_amount"]) == Decimal("75.00")


@pytest.mark.asyncio
@pytest.mark.e2e
@pytest.mark.parametrize("amount", ["0", "-5.00", "abc"])
async def test_invalid_amount_rejected_before_allocation(client, db_session, amount):
    await _seed(db_session, "100.00")

    response = await client.post("/api/v1/payments", json={"amount": amount})

    assert response.status_code == 422
    assert await _statuses(client) == ["OUTSTANDING"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_settled_obligations_are_skipped_by_later_payments(client, db_session):
    await _seed(db_session, "100.00", "200.00")

    first = await client.post("/api/v1/payments", json={"amount": "100.00"})
    second = await client.post("/api/v1/payments", json={"amount": "200.00"})
    third = await client.post("/api/v1/payments", json={"amount": "10.00"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert third.json()["category"] == "NOTHING_TO_PAY"


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_partial_store_confirmation_rolls_back(client, db_session, monkeypatch):
    await _seed(db_session, "100.00", "200.00")

    original = ObligationRepository.mark_settled

    async def confirm_one_less(self, settled):
        return await original(self, settled[:-1])

    monkeypatch.setattr(ObligationRepository, "mark_settled", confirm_one_less)

    response = await client.post("/api/v1/payments", json={"amount": "300.00"})

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "SETTLEMENT_CONFLICT"

    monkeypatch.setattr(ObligationRepository, "mark_settled", original)
    assert await _statuses(client) == ["OUTSTANDING", "OUTSTANDING"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_store_failure_returns_503(client, db_session, monkeypatch):
    from sqlalchemy.exc import OperationalError

    async def broken(self, lock=False):
        raise OperationalError("SELECT", {}, Exception("database is gone"))

    monkeypatch.setattr(ObligationRepository, "list_outstanding", broken)

    response = await client.post("/api/v1/payments", json={"amount": "10.00"})

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "OBLIGATION_STORE_UNAVAILABLE"


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_summary_lists_payable_amounts(client, db_session):
    await _seed(db_session, "100.00", "200.00", "0.50")
    await client.post("/api/v1/payments", json={"amount": "100.00"})

    response = await client.get("/api/v1/obligations/summary")

    assert response.status_code == 200
    body = response.json()
    assert body["outstanding_count"] == 2
    assert Decimal(body["outstanding_total"]) == Decimal("200.50")
    assert body["settled_count"] == 1
    assert Decimal(body["settled_total"]) == Decimal("100.00")
    assert [Decimal(a) for a in body["payable_amounts"]] == [Decimal("200.00"), Decimal("200.50")]
