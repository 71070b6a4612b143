from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.invoices.service import InvoiceService
from app.modules.invoices.schemas import InvoiceCreate, InvoiceUpdate, InvoiceOut, InvoiceDetail
from app.modules.ledger.roles import parse_role

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post("/", response_model=InvoiceDetail, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_data: InvoiceCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """
    Crear una factura (venta o compra) con sus ítems

    - **kind**: venta (requiere client_id) o compra (requiere supplier_id)
    - **subtype**: factura, nota de crédito, nota de débito o saldo inicial
    - **items**: al menos un ítem; subtotal, IVA (21%) y total se calculan
    """
    service = InvoiceService(db)
    return service.create_invoice(invoice_data)


@router.get("/", response_model=List[InvoiceOut])
def list_invoices(
    kind: Optional[str] = Query(None, description="venta o compra"),
    search: Optional[str] = Query(None, description="Fragmento del nombre del cliente/proveedor"),
    date_from: Optional[date] = Query(None, description="Fecha inicial (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Fecha final (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """
    Listar facturas de un tipo, ordenadas por fecha descendente

    Un nombre sin coincidencias devuelve una lista vacía.
    """
    service = InvoiceService(db)
    return service.search_invoices(parse_role(kind), search, date_from, date_to)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Obtener una factura con sus ítems"""
    return InvoiceService(db).get_invoice(invoice_id)


@router.put("/{invoice_id}", response_model=InvoiceDetail)
def replace_invoice(
    invoice_id: UUID,
    invoice_data: InvoiceUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Reemplazar la factura y todos sus ítems"""
    return InvoiceService(db).replace_invoice(invoice_id, invoice_data)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    InvoiceService(db).delete_invoice(invoice_id)
