from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import date as date_type

from app.modules.invoices.models import InvoiceKind, InvoiceSubtype


# Invoice Item Schemas
class InvoiceItemCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    quantity: Decimal = Field(..., gt=0, max_digits=12, decimal_places=3, description="Cantidad debe ser mayor a 0")
    unit_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2, description="Precio unitario sin IVA")

    @field_validator('unit_price')
    @classmethod
    def validate_unit_price(cls, v):
        if v < 0:
            raise ValueError('El precio unitario no puede ser negativo')
        return v


class InvoiceItemOut(BaseModel):
    id: UUID
    description: str
    quantity: Decimal
    unit_price: Decimal
    line_subtotal: Decimal

    class Config:
        from_attributes = True


# Invoice Schemas
class InvoiceCreate(BaseModel):
    """
    Alta o reemplazo completo de una factura.

    La lista de ítems se valida en el servicio (al menos uno) para que el
    rechazo sea un error de validación de negocio y no de formato.
    """
    number: str = Field(..., min_length=1, max_length=50)
    date: date_type
    kind: InvoiceKind
    subtype: InvoiceSubtype = InvoiceSubtype.FACTURA
    client_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    items: List[InvoiceItemCreate] = Field(default_factory=list)


class InvoiceUpdate(InvoiceCreate):
    pass


class InvoiceTotals(BaseModel):
    subtotal: Decimal
    iva: Decimal
    total: Decimal


class InvoiceOut(BaseModel):
    id: UUID
    number: str
    date: date_type
    kind: str
    subtype: str
    client_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    party_name: Optional[str] = None
    subtotal: Decimal
    iva: Decimal
    total: Decimal

    class Config:
        from_attributes = True

    @classmethod
    def from_decorated(cls, decorated) -> "InvoiceOut":
        out = cls.model_validate(decorated.record)
        return out.model_copy(update={"party_name": decorated.party_name})


class InvoiceDetail(InvoiceOut):
    items: List[InvoiceItemOut] = []
