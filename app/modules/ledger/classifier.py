"""
Clasificador de documentos: signo con el que cada subtipo de factura
entra en el total facturado de su parte.
"""

import logging
from decimal import Decimal
from typing import Optional

from app.modules.invoices.models import InvoiceSubtype
from app.modules.ledger.money import ZERO, to_decimal

logger = logging.getLogger(__name__)


SIGN_BY_SUBTYPE = {
    InvoiceSubtype.FACTURA: 1,
    InvoiceSubtype.NOTA_DEBITO: 1,
    InvoiceSubtype.NOTA_CREDITO: -1,
    InvoiceSubtype.SALDO_INICIAL: 1,
}


def parse_subtype(raw) -> Optional[InvoiceSubtype]:
    """Subtipo como enum, o None si el literal no es uno de los conocidos."""
    if isinstance(raw, InvoiceSubtype):
        return raw
    try:
        return InvoiceSubtype(raw)
    except ValueError:
        return None


def sign_for(raw_subtype) -> Optional[int]:
    """
    Signo (+1 / -1) de un subtipo, o None si debe excluirse.

    Un subtipo desconocido nunca se asume como factura: se excluye.
    """
    subtype = parse_subtype(raw_subtype)
    if subtype is None:
        return None
    return SIGN_BY_SUBTYPE[subtype]


def signed_total(invoice) -> Decimal:
    """Total de la factura con el signo de su subtipo aplicado."""
    sign = sign_for(invoice.subtype)
    if sign is None:
        logger.warning(
            f"Anomaly: invoice {getattr(invoice, 'id', '?')} has unrecognized subtype "
            f"{invoice.subtype!r}; excluded from balance"
        )
        return ZERO
    return sign * to_decimal(invoice.total)
