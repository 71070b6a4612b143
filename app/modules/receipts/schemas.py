from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import date as date_type

from app.modules.receipts.models import ReceiptKind


class ReceiptCheckCreate(BaseModel):
    check_type: Optional[str] = Field(None, max_length=30, description="común, diferido, ...")
    clearing_date: Optional[date_type] = Field(None, description="Fecha de cobro del cheque")
    bank: Optional[str] = Field(None, max_length=100)
    number: Optional[str] = Field(None, max_length=50)
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2, description="Monto del cheque")


class ReceiptCheckOut(ReceiptCheckCreate):
    id: UUID

    class Config:
        from_attributes = True


class ReceiptCreate(BaseModel):
    """Alta o reemplazo completo de un recibo (cobro o pago)."""
    number: Optional[str] = Field(None, max_length=50)
    date: date_type
    kind: ReceiptKind
    client_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    invoice_id: Optional[UUID] = Field(None, description="Factura imputada (opcional)")
    cash: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    transfer: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    other: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    notes: Optional[str] = None
    checks: List[ReceiptCheckCreate] = Field(default_factory=list)


class ReceiptUpdate(ReceiptCreate):
    pass


class ReceiptOut(BaseModel):
    id: UUID
    number: Optional[str] = None
    date: date_type
    kind: str
    client_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    invoice_id: Optional[UUID] = None
    party_name: Optional[str] = None
    cash: Decimal
    transfer: Decimal
    other: Decimal
    notes: Optional[str] = None
    total: Decimal

    class Config:
        from_attributes = True

    @classmethod
    def from_decorated(cls, decorated) -> "ReceiptOut":
        out = cls.model_validate(decorated.record)
        return out.model_copy(update={"party_name": decorated.party_name})


class ReceiptDetail(ReceiptOut):
    checks: List[ReceiptCheckOut] = []
