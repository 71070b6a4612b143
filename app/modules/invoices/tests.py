"""
Tests para el módulo de Facturación

- Cálculo de subtotal, IVA y total
- Validaciones de tipo, parte e ítems
- Alta, reemplazo, consulta y baja vía API
- Búsqueda por nombre y rango de fechas
"""

import pytest
from decimal import Decimal
from uuid import UUID, uuid4

from app.common.exceptions import ValidationError
from app.modules.invoices.models import Invoice, InvoiceItem, InvoiceKind, InvoiceSubtype
from app.modules.invoices.schemas import InvoiceCreate, InvoiceItemCreate
from app.modules.invoices.service import InvoiceService, calculate_invoice_totals
from app.modules.ledger.money import round2


def invoice_payload(party_id, kind="venta", items=None, **extra):
    field = "client_id" if kind == "venta" else "supplier_id"
    payload = {
        "number": "A-0001",
        "date": "2024-01-10",
        "kind": kind,
        field: str(party_id),
        "items": items if items is not None else [
            {"description": "Servicio", "quantity": "1", "unit_price": "1000.00"}
        ],
    }
    payload.update(extra)
    return payload


class TestInvoiceTotals:

    def test_totals_with_default_rate(self):
        items = [
            InvoiceItemCreate(description="A", quantity=Decimal("2"), unit_price=Decimal("100.00")),
            InvoiceItemCreate(description="B", quantity=Decimal("0.5"), unit_price=Decimal("33.33")),
        ]
        totals = calculate_invoice_totals(items)
        assert totals.subtotal == Decimal("216.67")
        assert totals.iva == Decimal("45.50")
        assert totals.total == Decimal("262.17")

    def test_iva_uses_unrounded_subtotal(self):
        # 0.165 × 0.21 = 0.03465; sobre 0.17 ya redondeado daría 0.04
        items = [InvoiceItemCreate(description="A", quantity=Decimal("0.165"), unit_price=Decimal("1.00"))]
        totals = calculate_invoice_totals(items)
        assert totals.subtotal == Decimal("0.17")
        assert totals.iva == Decimal("0.03")
        assert totals.total == Decimal("0.20")

    def test_custom_rate(self):
        items = [InvoiceItemCreate(description="A", quantity=Decimal("1"), unit_price=Decimal("100"))]
        assert calculate_invoice_totals(items, Decimal("0.105")).iva == Decimal("10.50")


class TestInvoiceService:

    def test_empty_items_rejected(self, db_session, sample_client):
        data = InvoiceCreate(**invoice_payload(sample_client.id, items=[]))
        with pytest.raises(ValidationError):
            InvoiceService(db_session).create_invoice(data)
        assert db_session.query(Invoice).count() == 0

    def test_party_must_match_kind(self, db_session, sample_client, sample_supplier):
        data = InvoiceCreate(**invoice_payload(sample_client.id, kind="compra"))
        with pytest.raises(ValidationError):
            InvoiceService(db_session).create_invoice(data)

        both = InvoiceCreate(**invoice_payload(sample_client.id, supplier_id=str(sample_supplier.id)))
        with pytest.raises(ValidationError):
            InvoiceService(db_session).create_invoice(both)

    def test_unknown_party_rejected(self, db_session):
        data = InvoiceCreate(**invoice_payload(uuid4()))
        with pytest.raises(ValidationError):
            InvoiceService(db_session).create_invoice(data)

    def test_create_persists_literals(self, db_session, sample_client):
        data = InvoiceCreate(**invoice_payload(sample_client.id, subtype="nota de crédito"))
        invoice = InvoiceService(db_session).create_invoice(data)
        assert invoice.kind == "venta"
        assert invoice.subtype == "nota de crédito"
        assert invoice.total == Decimal("1210.00")
        assert len(invoice.items) == 1

    def test_replace_with_empty_items_is_rejected(self, db_session, sample_client):
        service = InvoiceService(db_session)
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload(sample_client.id)))
        with pytest.raises(ValidationError):
            service.replace_invoice(invoice.id, InvoiceCreate(**invoice_payload(sample_client.id, items=[])))
        assert db_session.query(InvoiceItem).count() == 1


class TestInvoiceEndpoints:

    def test_create_invoice(self, client, auth_headers, sample_client):
        response = client.post("/invoices/", json=invoice_payload(sample_client.id), headers=auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["subtype"] == InvoiceSubtype.FACTURA.value
        assert Decimal(data["subtotal"]) == Decimal("1000")
        assert Decimal(data["iva"]) == Decimal("210")
        assert Decimal(data["total"]) == Decimal("1210")
        assert data["party_name"] == "Acme SA"
        assert len(data["items"]) == 1

    def test_create_without_items_is_400(self, client, auth_headers, sample_client):
        response = client.post("/invoices/", json=invoice_payload(sample_client.id, items=[]), headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_invalid_subtype_is_422(self, client, auth_headers, sample_client):
        response = client.post(
            "/invoices/", json=invoice_payload(sample_client.id, subtype="remito"), headers=auth_headers
        )
        assert response.status_code == 422

    def test_amounts_beyond_column_precision_are_422(self, client, auth_headers, sample_client):
        for item in [
            {"description": "x", "quantity": "1.0005", "unit_price": "1000.00"},
            {"description": "x", "quantity": "1", "unit_price": "10.005"},
        ]:
            response = client.post(
                "/invoices/", json=invoice_payload(sample_client.id, items=[item]), headers=auth_headers
            )
            assert response.status_code == 422

    def test_stored_subtotal_matches_stored_items(self, client, auth_headers, db_session, sample_client):
        items = [
            {"description": "Horas", "quantity": "1.005", "unit_price": "1000.00"},
            {"description": "Insumos", "quantity": "0.333", "unit_price": "33.33"},
        ]
        created = client.post(
            "/invoices/", json=invoice_payload(sample_client.id, items=items), headers=auth_headers
        ).json()

        db_session.expire_all()
        invoice = db_session.get(Invoice, UUID(created["id"]))
        lines = sum((item.line_subtotal for item in invoice.items), Decimal("0"))
        assert invoice.subtotal == round2(lines)
        assert invoice.total == invoice.subtotal + invoice.iva
        assert Decimal(created["subtotal"]) == invoice.subtotal

    def test_list_requires_kind(self, client, auth_headers):
        response = client.get("/invoices/", headers=auth_headers)
        assert response.status_code == 400
        assert "venta" in response.json()["detail"]

    def test_search_by_name_and_dates(self, client, auth_headers, sample_client, other_client):
        client.post("/invoices/", json=invoice_payload(sample_client.id), headers=auth_headers)
        client.post("/invoices/", json=invoice_payload(sample_client.id, number="A-0002", date="2024-02-05"), headers=auth_headers)
        client.post("/invoices/", json=invoice_payload(other_client.id, number="A-0003", date="2024-01-20"), headers=auth_headers)

        response = client.get("/invoices/", params={"kind": "venta"}, headers=auth_headers)
        assert [row["date"] for row in response.json()] == ["2024-02-05", "2024-01-20", "2024-01-10"]

        response = client.get(
            "/invoices/",
            params={"kind": "venta", "search": "acme sa", "date_from": "2024-01-01", "date_to": "2024-01-31"},
            headers=auth_headers,
        )
        rows = response.json()
        assert [row["number"] for row in rows] == ["A-0001"]
        assert rows[0]["party_name"] == "Acme SA"

        response = client.get("/invoices/", params={"kind": "venta", "search": "zeta"}, headers=auth_headers)
        assert response.json() == []

    def test_replace_invoice(self, client, auth_headers, sample_client):
        created = client.post("/invoices/", json=invoice_payload(sample_client.id), headers=auth_headers).json()
        items = [
            {"description": "Nuevo A", "quantity": "1", "unit_price": "10.00"},
            {"description": "Nuevo B", "quantity": "3", "unit_price": "10.00"},
        ]
        response = client.put(
            f"/invoices/{created['id']}",
            json=invoice_payload(sample_client.id, items=items, subtype="nota de débito"),
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert [item["description"] for item in data["items"]] == ["Nuevo A", "Nuevo B"]
        assert Decimal(data["total"]) == Decimal("48.40")
        assert data["subtype"] == "nota de débito"

    def test_get_and_delete(self, client, auth_headers, sample_client):
        created = client.post("/invoices/", json=invoice_payload(sample_client.id), headers=auth_headers).json()
        assert client.get(f"/invoices/{created['id']}", headers=auth_headers).status_code == 200
        assert client.delete(f"/invoices/{created['id']}", headers=auth_headers).status_code == 204
        response = client.get(f"/invoices/{created['id']}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Factura no encontrado"

    def test_regular_user_can_invoice(self, client, user_headers, sample_supplier):
        response = client.post(
            "/invoices/", json=invoice_payload(sample_supplier.id, kind="compra"), headers=user_headers
        )
        assert response.status_code == 201
        assert response.json()["kind"] == InvoiceKind.COMPRA.value
