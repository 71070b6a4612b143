"""
Fixtures compartidas para los tests de todos los módulos.

La app se importa contra una base SQLite en memoria: las variables de
entorno se fijan antes de importar cualquier módulo de `app`.
"""
import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from app.database.database import Base, SessionLocal, get_db, sync_engine
from app.main import app
from app.modules.auth.models import User, UserRole
from app.modules.auth.utils import create_access_token, hash_password
from app.modules.parties.models import Client, Supplier


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=sync_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db_session, email: str, role: UserRole) -> User:
    user = User(
        name=email.split("@")[0],
        email=email,
        password=hash_password("secreto123"),
        role=role.value,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "rol": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session):
    return _make_user(db_session, "admin@cuentas.com", UserRole.ADMIN)


@pytest.fixture
def regular_user(db_session):
    return _make_user(db_session, "operador@cuentas.com", UserRole.USUARIO)


@pytest.fixture
def auth_headers(admin_user):
    return _headers_for(admin_user)


@pytest.fixture
def user_headers(regular_user):
    return _headers_for(regular_user)


@pytest.fixture
def sample_client(db_session):
    party = Client(name="Acme SA", tax_id="20-12345678-6", email="compras@acme.com")
    db_session.add(party)
    db_session.commit()
    db_session.refresh(party)
    return party


@pytest.fixture
def other_client(db_session):
    party = Client(name="Acme Logística SRL")
    db_session.add(party)
    db_session.commit()
    db_session.refresh(party)
    return party


@pytest.fixture
def sample_supplier(db_session):
    party = Supplier(name="Distribuidora Norte", tax_id="30-71234567-1")
    db_session.add(party)
    db_session.commit()
    db_session.refresh(party)
    return party


@pytest.fixture
def one_item():
    return [{"description": "Servicio", "quantity": "1", "unit_price": "1000.00"}]

