"""
Tests de autenticación y gestión de usuarios
"""

from datetime import timedelta
from uuid import uuid4

import jwt

from app.core.config import settings
from app.modules.auth.utils import create_access_token, hash_password, verify_password


class TestPasswordAndTokens:

    def test_hash_roundtrip(self):
        hashed = hash_password("secreto123")
        assert hashed != "secreto123"
        assert verify_password("secreto123", hashed)
        assert not verify_password("otra", hashed)
        assert not verify_password("secreto123", "")

    def test_token_carries_subject_and_role(self):
        token = create_access_token(data={"sub": "abc", "rol": "admin"})
        payload = jwt.decode(token, settings.APP_SECRET_STRING, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == "abc"
        assert payload["rol"] == "admin"
        assert payload["type"] == "access"


class TestLogin:

    def test_login_success(self, client, admin_user):
        response = client.post("/auth/login", json={"email": "admin@cuentas.com", "password": "secreto123"})
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "admin"
        assert "password" not in data["user"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == "admin@cuentas.com"

    def test_wrong_password(self, client, admin_user):
        response = client.post("/auth/login", json={"email": "admin@cuentas.com", "password": "mala"})
        assert response.status_code == 401

    def test_unknown_email(self, client, admin_user):
        response = client.post("/auth/login", json={"email": "nadie@cuentas.com", "password": "secreto123"})
        assert response.status_code == 401

    def test_inactive_user(self, client, db_session, admin_user):
        admin_user.is_active = False
        db_session.commit()
        response = client.post("/auth/login", json={"email": "admin@cuentas.com", "password": "secreto123"})
        assert response.status_code == 403


class TestAuthGate:

    def test_missing_token(self, client):
        assert client.get("/auth/me").status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer no-es-un-token"})
        assert response.status_code == 401

    def test_expired_token(self, client, admin_user):
        token = create_access_token(data={"sub": str(admin_user.id)}, expires_delta=timedelta(minutes=-1))
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_unknown_user(self, client, db_session):
        token = create_access_token(data={"sub": str(uuid4())})
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_regular_user_cannot_manage_users(self, client, user_headers):
        assert client.get("/users/", headers=user_headers).status_code == 403


class TestUserManagement:

    def test_create_list_update_delete(self, client, auth_headers):
        response = client.post("/users/", json={
            "name": "Operador", "email": "op@cuentas.com", "password": "clave123",
        }, headers=auth_headers)
        assert response.status_code == 201
        user = response.json()
        assert user["role"] == "usuario"

        emails = [u["email"] for u in client.get("/users/", headers=auth_headers).json()]
        assert "op@cuentas.com" in emails

        response = client.put(f"/users/{user['id']}", json={"role": "admin"}, headers=auth_headers)
        assert response.json()["role"] == "admin"

        assert client.delete(f"/users/{user['id']}", headers=auth_headers).status_code == 204
        assert client.get(f"/users/{user['id']}", headers=auth_headers).status_code == 404

    def test_duplicate_email_is_409(self, client, auth_headers):
        payload = {"name": "Admin 2", "email": "admin@cuentas.com", "password": "clave123"}
        assert client.post("/users/", json=payload, headers=auth_headers).status_code == 409

    def test_set_password(self, client, auth_headers, regular_user):
        response = client.put(
            f"/users/{regular_user.id}/set-password", json={"new_password": "nueva123"}, headers=auth_headers
        )
        assert response.status_code == 200
        login = client.post("/auth/login", json={"email": "operador@cuentas.com", "password": "nueva123"})
        assert login.status_code == 200
