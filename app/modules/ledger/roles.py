"""
Roles de una consulta de saldo y su correspondencia con documentos y partes.

El rol de la consulta es el tipo de factura: 'venta' trabaja sobre clientes
y recibos de cobro, 'compra' sobre proveedores y recibos de pago.
"""

from typing import Type, Union

from app.common.exceptions import ValidationError
from app.modules.invoices.models import InvoiceKind
from app.modules.parties.models import Client, Supplier
from app.modules.receipts.models import ReceiptKind


RECEIPT_KIND_BY_ROLE = {
    InvoiceKind.VENTA: ReceiptKind.COBRO,
    InvoiceKind.COMPRA: ReceiptKind.PAGO,
}

ROLE_BY_RECEIPT_KIND = {kind: role for role, kind in RECEIPT_KIND_BY_ROLE.items()}

PARTY_MODEL_BY_ROLE = {
    InvoiceKind.VENTA: Client,
    InvoiceKind.COMPRA: Supplier,
}

PARTY_FIELD_BY_ROLE = {
    InvoiceKind.VENTA: "client_id",
    InvoiceKind.COMPRA: "supplier_id",
}

PARTY_LABEL_BY_ROLE = {
    InvoiceKind.VENTA: "Cliente",
    InvoiceKind.COMPRA: "Proveedor",
}


def parse_role(value: Union[str, InvoiceKind, None]) -> InvoiceKind:
    """Valida el rol de una consulta ('venta' o 'compra')."""
    if isinstance(value, InvoiceKind):
        return value
    try:
        return InvoiceKind(value)
    except ValueError:
        raise ValidationError('Debe indicar el tipo: "venta" o "compra"')


def parse_receipt_kind(value: Union[str, ReceiptKind, None]) -> ReceiptKind:
    """Valida el tipo de recibo ('cobro' o 'pago')."""
    if isinstance(value, ReceiptKind):
        return value
    try:
        return ReceiptKind(value)
    except ValueError:
        raise ValidationError('Debe indicar el tipo: "cobro" o "pago"')


def receipt_kind_for(role: InvoiceKind) -> ReceiptKind:
    return RECEIPT_KIND_BY_ROLE[role]


def role_for_receipt_kind(kind: ReceiptKind) -> InvoiceKind:
    return ROLE_BY_RECEIPT_KIND[kind]


def party_model_for(role: InvoiceKind) -> Type[Union[Client, Supplier]]:
    return PARTY_MODEL_BY_ROLE[role]


def party_field_for(role: InvoiceKind) -> str:
    return PARTY_FIELD_BY_ROLE[role]


def party_id_of(document, role: InvoiceKind):
    """Id de la parte de una factura o recibo según el rol de la consulta."""
    return getattr(document, party_field_for(role))
