"""
Tests para el módulo de Recibos (cobros y pagos)
"""

import pytest
from decimal import Decimal

from app.common.exceptions import ValidationError
from app.modules.receipts.models import Receipt, ReceiptCheck
from app.modules.receipts.schemas import ReceiptCreate
from app.modules.receipts.service import ReceiptService


def receipt_payload(party_id, kind="cobro", **extra):
    field = "client_id" if kind == "cobro" else "supplier_id"
    payload = {
        "number": "R-0001",
        "date": "2024-01-15",
        "kind": kind,
        field: str(party_id),
        "cash": "300.00",
        "transfer": "200.00",
        "checks": [{"check_type": "diferido", "bank": "Nación", "number": "0001", "amount": "150.00"}],
    }
    payload.update(extra)
    return payload


class TestReceiptService:

    def test_total_includes_checks(self, db_session, sample_client):
        receipt = ReceiptService(db_session).create_receipt(ReceiptCreate(**receipt_payload(sample_client.id)))
        assert receipt.total == Decimal("650.00")
        assert [check.amount for check in receipt.checks] == [Decimal("150.00")]

    def test_cash_only_receipt(self, db_session, sample_client):
        data = ReceiptCreate(**receipt_payload(sample_client.id, checks=[], transfer="0"))
        assert ReceiptService(db_session).create_receipt(data).total == Decimal("300.00")

    def test_party_must_match_kind(self, db_session, sample_client):
        with pytest.raises(ValidationError):
            ReceiptService(db_session).create_receipt(ReceiptCreate(**receipt_payload(sample_client.id, kind="pago")))
        assert db_session.query(Receipt).count() == 0

    def test_linked_invoice_must_belong_to_party(self, client, auth_headers, db_session, sample_client, other_client):
        invoice = client.post("/invoices/", json={
            "number": "A-1", "date": "2024-01-10", "kind": "venta", "client_id": str(other_client.id),
            "items": [{"description": "x", "quantity": "1", "unit_price": "10"}],
        }, headers=auth_headers).json()
        data = ReceiptCreate(**receipt_payload(sample_client.id, invoice_id=invoice["id"]))
        with pytest.raises(ValidationError):
            ReceiptService(db_session).create_receipt(data)

    def test_replace_swaps_checks(self, db_session, sample_client):
        service = ReceiptService(db_session)
        receipt = service.create_receipt(ReceiptCreate(**receipt_payload(sample_client.id)))
        replacement = receipt_payload(
            sample_client.id,
            cash="0",
            transfer="0",
            checks=[{"amount": "10.00"}, {"amount": "20.00"}],
        )
        updated = service.replace_receipt(receipt.id, ReceiptCreate(**replacement))
        assert updated.total == Decimal("30.00")
        assert db_session.query(ReceiptCheck).count() == 2


class TestReceiptEndpoints:

    def test_create_and_get(self, client, auth_headers, sample_client):
        response = client.post("/receipts/", json=receipt_payload(sample_client.id), headers=auth_headers)
        assert response.status_code == 201
        created = response.json()
        assert Decimal(created["total"]) == Decimal("650")
        assert created["party_name"] == "Acme SA"

        response = client.get(f"/receipts/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["checks"][0]["bank"] == "Nación"

    def test_negative_amounts_rejected(self, client, auth_headers, sample_client):
        payload = receipt_payload(sample_client.id, checks=[{"amount": "-5"}])
        assert client.post("/receipts/", json=payload, headers=auth_headers).status_code == 422
        payload = receipt_payload(sample_client.id, cash="-1")
        assert client.post("/receipts/", json=payload, headers=auth_headers).status_code == 422

    def test_sub_cent_amounts_are_422(self, client, auth_headers, sample_client):
        payload = receipt_payload(sample_client.id, cash="0.005", transfer="0.005", checks=[])
        assert client.post("/receipts/", json=payload, headers=auth_headers).status_code == 422
        payload = receipt_payload(sample_client.id, checks=[{"amount": "150.001"}])
        assert client.post("/receipts/", json=payload, headers=auth_headers).status_code == 422

    def test_total_matches_collected_balance(self, client, auth_headers, sample_client):
        payload = receipt_payload(
            sample_client.id, cash="0.01", transfer="0.02", other="0.03",
            checks=[{"amount": "10.10"}, {"amount": "0.05"}],
        )
        created = client.post("/receipts/", json=payload, headers=auth_headers).json()
        assert Decimal(created["total"]) == Decimal("10.21")

        balance = client.get(f"/balance/clients/{sample_client.id}", headers=auth_headers).json()
        assert Decimal(balance["total_collected"]) == Decimal(created["total"])

    def test_list_by_kind_and_name(self, client, auth_headers, sample_client, sample_supplier):
        client.post("/receipts/", json=receipt_payload(sample_client.id), headers=auth_headers)
        client.post("/receipts/", json=receipt_payload(sample_supplier.id, kind="pago"), headers=auth_headers)

        cobros = client.get("/receipts/", params={"kind": "cobro"}, headers=auth_headers).json()
        assert [row["kind"] for row in cobros] == ["cobro"]

        pagos = client.get("/receipts/", params={"kind": "pago", "search": "norte"}, headers=auth_headers).json()
        assert [row["party_name"] for row in pagos] == ["Distribuidora Norte"]

        assert client.get("/receipts/", params={"kind": "venta"}, headers=auth_headers).status_code == 400

    def test_delete(self, client, auth_headers, sample_client):
        created = client.post("/receipts/", json=receipt_payload(sample_client.id), headers=auth_headers).json()
        assert client.delete(f"/receipts/{created['id']}", headers=auth_headers).status_code == 204
        assert client.get(f"/receipts/{created['id']}", headers=auth_headers).status_code == 404
