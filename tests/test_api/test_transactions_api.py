"""
Tests for /api/transactions
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from fundytrack.db.models.transaction import TransactionType
from fundytrack.schemas.transaction import TransactionCreate, TransactionUpdate


def _transaction(id=1, category=None, amount="12.50", type=TransactionType.expense):
    return SimpleNamespace(
        id=id,
        date=date(2025, 11, 3),
        description="Lunch",
        amount=Decimal(amount),
        type=type,
        category_id=category.id if category else None,
        category=category,
    )


def test_list_transactions(client):
    food = SimpleNamespace(id=1, name="Food")
    rows = [_transaction(2, category=food), _transaction(1)]
    with patch("fundytrack.crud.crud_transaction.get_transactions",
               new=AsyncMock(return_value=(rows, 2))) as mock_get:
        resp = client.get("/api/transactions/", params={"type": "expense", "month": "2025-11"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total_count"] == 2
    assert [t["id"] for t in body["transactions"]] == [2, 1]
    assert body["transactions"][0]["category_name"] == "Food"
    assert body["transactions"][1]["category_name"] == "Uncategorized"
    assert mock_get.await_args.kwargs["filters"] == {"type": "expense", "month": "2025-11"}


def test_list_transactions_rejects_bad_month(client):
    resp = client.get("/api/transactions/", params={"month": "2025-13"})

    assert resp.status_code == 422


def test_create_transaction(client):
    created = _transaction(7)
    payload = {"date": "2025-11-03", "description": "Lunch", "amount": 12.5, "type": "expense"}
    with patch("fundytrack.crud.crud_transaction.create_transaction",
               new=AsyncMock(return_value=created)) as mock_create:
        resp = client.post("/api/transactions/", json=payload)

    assert resp.status_code == 201
    assert resp.json()["id"] == 7
    assert resp.json()["amount"] == 12.5
    assert mock_create.await_args.kwargs["obj_in"].category_id is None


def test_create_transaction_with_foreign_category(client):
    payload = {"date": "2025-11-03", "description": "Lunch", "amount": 12.5, "type": "expense", "category_id": 99}
    with patch("fundytrack.crud.crud_category.get_category", new=AsyncMock(return_value=None)), \
         patch("fundytrack.crud.crud_transaction.create_transaction", new=AsyncMock()) as mock_create:
        resp = client.post("/api/transactions/", json=payload)

    assert resp.status_code == 400
    mock_create.assert_not_awaited()


def test_create_transaction_validation(client):
    payload = {"date": "2025-11-03", "description": "Lunch", "amount": -1, "type": "transfer"}

    resp = client.post("/api/transactions/", json=payload)

    assert resp.status_code == 422


def test_read_missing_transaction(client):
    with patch("fundytrack.crud.crud_transaction.get_transaction", new=AsyncMock(return_value=None)):
        resp = client.get("/api/transactions/5")

    assert resp.status_code == 404


def test_update_transaction_amount(client):
    existing = _transaction(3)
    updated = _transaction(3, amount="20")
    with patch("fundytrack.crud.crud_transaction.get_transaction", new=AsyncMock(return_value=existing)), \
         patch("fundytrack.crud.crud_transaction.update_transaction",
               new=AsyncMock(return_value=updated)) as mock_update:
        resp = client.patch("/api/transactions/3", json={"amount": 20})

    assert resp.status_code == 200
    assert resp.json()["amount"] == 20
    assert mock_update.await_args.kwargs["obj_in"].model_dump(exclude_unset=True) == {"amount": 20}


def test_delete_transaction(client):
    with patch("fundytrack.crud.crud_transaction.remove_transaction",
               new=AsyncMock(return_value=_transaction(3))):
        resp = client.delete("/api/transactions/3")

    assert resp.status_code == 204


@pytest.mark.parametrize("amount", [10_000_000_000.00, 1e13, 0.005])
def test_create_transaction_rejects_amounts_storage_cannot_hold(client, amount):
    payload = {"date": "2025-11-03", "description": "Lunch", "amount": amount, "type": "expense"}
    with patch("fundytrack.crud.crud_transaction.create_transaction", new=AsyncMock()) as mock_create:
        resp = client.post("/api/transactions/", json=payload)

    assert resp.status_code == 422
    mock_create.assert_not_awaited()


def test_largest_storable_amount_is_accepted():
    transaction_in = TransactionCreate(date=date(2025, 11, 3), description="Car", amount="9999999999.99", type="expense")

    assert transaction_in.amount == Decimal("9999999999.99")


@pytest.mark.parametrize("amount", [float("inf"), float("nan")])
def test_non_finite_amounts_are_rejected(amount):
    with pytest.raises(ValidationError):
        TransactionCreate(date=date(2025, 11, 3), description="Lunch", amount=amount, type="expense")
    with pytest.raises(ValidationError):
        TransactionUpdate(amount=amount)
