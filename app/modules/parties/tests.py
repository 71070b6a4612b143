"""
Tests para Clientes y Proveedores

- Validación de CUIT
- CRUD vía API sobre /clients y /suppliers
- Unicidad de CUIT por tabla y bloqueo de bajas con documentos
"""

import pytest

from app.common.validators import calculate_cuit_check_digit, format_cuit, validate_cuit


class TestCuitValidation:

    def test_valid_cuits(self):
        assert validate_cuit("20-12345678-6")
        assert validate_cuit("30712345671")
        assert validate_cuit("30.71234567.1")

    def test_invalid_cuits(self):
        assert not validate_cuit("20-12345678-5")   # dígito verificador
        assert not validate_cuit("99-12345678-6")   # prefijo
        assert not validate_cuit("2012345678")      # largo
        assert not validate_cuit("")

    def test_check_digit(self):
        assert calculate_cuit_check_digit("2012345678") == 6
        assert calculate_cuit_check_digit("abc") is None

    def test_format(self):
        assert format_cuit("20123456786") == "20-12345678-6"


class TestPartyEndpoints:

    @pytest.mark.parametrize("prefix", ["/clients", "/suppliers"])
    def test_crud(self, client, auth_headers, prefix):
        response = client.post(f"{prefix}/", json={
            "name": "Ferretería Sur", "tax_id": "20123456786", "email": "ventas@sur.com",
        }, headers=auth_headers)
        assert response.status_code == 201
        party = response.json()
        assert party["tax_id"] == "20-12345678-6"

        response = client.put(f"{prefix}/{party['id']}", json={"phone": "011-4444-5555"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["phone"] == "011-4444-5555"
        assert response.json()["name"] == "Ferretería Sur"

        assert client.get(f"{prefix}/{party['id']}", headers=auth_headers).status_code == 200
        assert client.delete(f"{prefix}/{party['id']}", headers=auth_headers).status_code == 204
        assert client.get(f"{prefix}/{party['id']}", headers=auth_headers).status_code == 404

    def test_invalid_cuit_is_422(self, client, auth_headers):
        response = client.post("/clients/", json={"name": "X", "tax_id": "20-12345678-5"}, headers=auth_headers)
        assert response.status_code == 422

    def test_duplicate_cuit_is_409(self, client, auth_headers, sample_client):
        response = client.post("/clients/", json={"name": "Otra", "tax_id": "20-12345678-6"}, headers=auth_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "conflict"

    def test_same_cuit_allowed_in_other_table(self, client, auth_headers, sample_client):
        response = client.post("/suppliers/", json={"name": "Acme SA", "tax_id": "20-12345678-6"}, headers=auth_headers)
        assert response.status_code == 201

    def test_list_ordered_and_searchable(self, client, auth_headers, sample_client, other_client):
        names = [p["name"] for p in client.get("/clients/", headers=auth_headers).json()]
        assert names == ["Acme Logística SRL", "Acme SA"]

        found = client.get("/clients/", params={"search": "SRL"}, headers=auth_headers).json()
        assert [p["name"] for p in found] == ["Acme Logística SRL"]

    def test_delete_with_documents_is_409(self, client, auth_headers, sample_client):
        client.post("/invoices/", json={
            "number": "A-1", "date": "2024-01-10", "kind": "venta", "client_id": str(sample_client.id),
            "items": [{"description": "x", "quantity": "1", "unit_price": "10"}],
        }, headers=auth_headers)
        response = client.delete(f"/clients/{sample_client.id}", headers=auth_headers)
        assert response.status_code == 409

    def test_requires_token(self, client):
        assert client.get("/suppliers/").status_code == 401
