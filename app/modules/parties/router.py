from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.invoices.models import InvoiceKind
from app.modules.parties.schemas import PartyCreate, PartyUpdate, PartyOut
from app.modules.parties.service import PartyService


def build_party_router(role: InvoiceKind, prefix: str, tag: str) -> APIRouter:
    """Router CRUD de una tabla de partes (clientes o proveedores)."""
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("/", response_model=List[PartyOut])
    def list_parties(
        search: Optional[str] = Query(None, description="Buscar por nombre"),
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_any_role())
    ):
        return PartyService(db, role).list_parties(search)

    @router.get("/{party_id}", response_model=PartyOut)
    def get_party(
        party_id: UUID,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_any_role())
    ):
        return PartyService(db, role).get_party(party_id)

    @router.post("/", response_model=PartyOut, status_code=status.HTTP_201_CREATED)
    def create_party(
        party_data: PartyCreate,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_any_role())
    ):
        return PartyService(db, role).create_party(party_data)

    @router.put("/{party_id}", response_model=PartyOut)
    def update_party(
        party_id: UUID,
        party_data: PartyUpdate,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_any_role())
    ):
        return PartyService(db, role).update_party(party_id, party_data)

    @router.delete("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_party(
        party_id: UUID,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_any_role())
    ):
        PartyService(db, role).delete_party(party_id)

    return router


clients_router = build_party_router(InvoiceKind.VENTA, "/clients", "Clients")
suppliers_router = build_party_router(InvoiceKind.COMPRA, "/suppliers", "Suppliers")
