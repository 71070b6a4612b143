"""
Endpoints de saldos de cuenta corriente.

Las rutas fijas (/search, /resolve) se declaran antes que /{party_id}.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.invoices.models import InvoiceKind
from app.modules.ledger.balance import BalanceAggregator
from app.modules.ledger.resolver import PartyResolver
from app.modules.ledger.schemas import BalanceOut
from app.modules.ledger.search import SearchOrchestrator
from app.modules.ledger.store import LedgerStore

router = APIRouter(prefix="/balance", tags=["Balance"])


def _list_balances(role: InvoiceKind, db: Session) -> List[BalanceOut]:
    balances = BalanceAggregator(LedgerStore(db)).compute_balances_for_all_parties(role)
    return [BalanceOut.model_validate(balance) for balance in balances]


def _search_balances(role, db, name, date_from, date_to) -> List[BalanceOut]:
    balances = SearchOrchestrator(LedgerStore(db)).search_balances(role, name, date_from, date_to)
    return [BalanceOut.model_validate(balance) for balance in balances]


def _resolve_balance(role: InvoiceKind, db: Session, name: str) -> BalanceOut:
    store = LedgerStore(db)
    party = PartyResolver(store).resolve_single(role, name)
    return BalanceOut.model_validate(BalanceAggregator(store).compute_balance(party.id, role))


def _party_balance(role: InvoiceKind, db: Session, party_id: UUID) -> BalanceOut:
    balance = BalanceAggregator(LedgerStore(db)).compute_balance(party_id, role)
    return BalanceOut.model_validate(balance)


# ===== CLIENTES =====

@router.get("/clients", response_model=List[BalanceOut])
def list_client_balances(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Saldo de cada cliente, incluidos los que no tienen movimientos"""
    return _list_balances(InvoiceKind.VENTA, db)


@router.get("/clients/search", response_model=List[BalanceOut])
def search_client_balances(
    name: Optional[str] = Query(None, description="Fragmento del nombre del cliente"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Saldos de los clientes que coinciden, restringidos al rango de fechas"""
    return _search_balances(InvoiceKind.VENTA, db, name, date_from, date_to)


@router.get("/clients/resolve", response_model=BalanceOut)
def resolve_client_balance(
    name: str = Query(..., description="Nombre o fragmento del nombre del cliente"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """
    Saldo histórico de un único cliente buscado por nombre

    Si varios clientes coinciden y ninguno es idéntico responde 409 con los candidatos.
    """
    return _resolve_balance(InvoiceKind.VENTA, db, name)


@router.get("/clients/{party_id}", response_model=BalanceOut)
def get_client_balance(
    party_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return _party_balance(InvoiceKind.VENTA, db, party_id)


# ===== PROVEEDORES =====

@router.get("/suppliers", response_model=List[BalanceOut])
def list_supplier_balances(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Saldo de cada proveedor, incluidos los que no tienen movimientos"""
    return _list_balances(InvoiceKind.COMPRA, db)


@router.get("/suppliers/search", response_model=List[BalanceOut])
def search_supplier_balances(
    name: Optional[str] = Query(None, description="Fragmento del nombre del proveedor"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return _search_balances(InvoiceKind.COMPRA, db, name, date_from, date_to)


@router.get("/suppliers/resolve", response_model=BalanceOut)
def resolve_supplier_balance(
    name: str = Query(..., description="Nombre o fragmento del nombre del proveedor"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return _resolve_balance(InvoiceKind.COMPRA, db, name)


@router.get("/suppliers/{party_id}", response_model=BalanceOut)
def get_supplier_balance(
    party_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return _party_balance(InvoiceKind.COMPRA, db, party_id)
