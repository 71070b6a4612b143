from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.ledger.roles import parse_receipt_kind
from app.modules.receipts.service import ReceiptService
from app.modules.receipts.schemas import ReceiptCreate, ReceiptUpdate, ReceiptOut, ReceiptDetail

router = APIRouter(prefix="/receipts", tags=["Receipts"])


@router.post("/", response_model=ReceiptDetail, status_code=status.HTTP_201_CREATED)
def create_receipt(
    receipt_data: ReceiptCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """
    Registrar un recibo de cobro (cliente) o de pago (proveedor)

    El total es efectivo + transferencia + otros + la suma de los cheques.
    """
    return ReceiptService(db).create_receipt(receipt_data)


@router.get("/", response_model=List[ReceiptOut])
def list_receipts(
    kind: Optional[str] = Query(None, description="cobro o pago"),
    search: Optional[str] = Query(None, description="Fragmento del nombre del cliente/proveedor"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return ReceiptService(db).search_receipts(parse_receipt_kind(kind), search, date_from, date_to)


@router.get("/{receipt_id}", response_model=ReceiptDetail)
def get_receipt(
    receipt_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return ReceiptService(db).get_receipt(receipt_id)


@router.put("/{receipt_id}", response_model=ReceiptDetail)
def replace_receipt(
    receipt_id: UUID,
    receipt_data: ReceiptUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Reemplazar el recibo y todos sus cheques"""
    return ReceiptService(db).replace_receipt(receipt_id, receipt_data)


@router.delete("/{receipt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_receipt(
    receipt_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    ReceiptService(db).delete_receipt(receipt_id)
