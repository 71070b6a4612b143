from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from datetime import date
import logging

from sqlalchemy.orm import Session

from app.common.exceptions import NotFoundError, ValidationError
from app.core.config import settings
from app.modules.invoices.models import Invoice, InvoiceItem, InvoiceKind
from app.modules.invoices.schemas import InvoiceCreate, InvoiceItemCreate, InvoiceOut, InvoiceTotals
from app.modules.ledger.money import money_sum, round2, scale
from app.modules.ledger.roles import PARTY_LABEL_BY_ROLE
from app.modules.ledger.search import SearchOrchestrator
from app.modules.ledger.store import LedgerStore

logger = logging.getLogger(__name__)


def calculate_invoice_totals(items: List[InvoiceItemCreate], iva_rate: Decimal = None) -> InvoiceTotals:
    """
    subtotal = Σ cantidad × precio; iva = subtotal × tasa; total = subtotal + iva

    Subtotal e IVA se calculan sobre el subtotal exacto; cada uno se
    redondea a centavos una sola vez, al final.
    """
    rate = settings.IVA_RATE if iva_rate is None else iva_rate
    exact_subtotal = money_sum(item.quantity * item.unit_price for item in items)
    subtotal = round2(exact_subtotal)
    iva = round2(scale(exact_subtotal, rate))
    return InvoiceTotals(subtotal=subtotal, iva=iva, total=subtotal + iva)


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db
        self.store = LedgerStore(db)

    def validate_invoice_data(self, invoice_data: InvoiceCreate) -> None:
        """Validar datos de la factura antes de tocar el store"""
        if not invoice_data.items:
            raise ValidationError("La factura debe incluir al menos un ítem")

        if invoice_data.kind == InvoiceKind.VENTA:
            if not invoice_data.client_id:
                raise ValidationError('client_id requerido para tipo "venta"')
            if invoice_data.supplier_id:
                raise ValidationError('Una factura de venta no puede tener supplier_id')
            party_id = invoice_data.client_id
        else:
            if not invoice_data.supplier_id:
                raise ValidationError('supplier_id requerido para tipo "compra"')
            if invoice_data.client_id:
                raise ValidationError('Una factura de compra no puede tener client_id')
            party_id = invoice_data.supplier_id

        try:
            self.store.get_party(invoice_data.kind, party_id)
        except NotFoundError:
            raise ValidationError(
                f"{PARTY_LABEL_BY_ROLE[invoice_data.kind]} {party_id} no existe"
            )

    def _build(self, invoice_data: InvoiceCreate):
        totals = calculate_invoice_totals(invoice_data.items)
        values = {
            "number": invoice_data.number,
            "date": invoice_data.date,
            "kind": invoice_data.kind.value,
            "subtype": invoice_data.subtype.value,
            "client_id": invoice_data.client_id,
            "supplier_id": invoice_data.supplier_id,
            "subtotal": totals.subtotal,
            "iva": totals.iva,
            "total": totals.total,
        }
        items = [
            InvoiceItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in invoice_data.items
        ]
        return values, items

    def create_invoice(self, invoice_data: InvoiceCreate) -> Invoice:
        """Crear factura con sus ítems en una sola transacción"""
        self.validate_invoice_data(invoice_data)
        values, items = self._build(invoice_data)
        invoice_id = self.store.create_invoice(Invoice(**values), items)
        return self.store.get_invoice(invoice_id)

    def replace_invoice(self, invoice_id: UUID, invoice_data: InvoiceCreate) -> Invoice:
        """Reemplazar la factura completa, incluidos todos sus ítems"""
        self.store.get_invoice(invoice_id)
        self.validate_invoice_data(invoice_data)
        values, items = self._build(invoice_data)
        self.store.replace_invoice(invoice_id, values, items)
        return self.store.get_invoice(invoice_id)

    def get_invoice(self, invoice_id: UUID) -> Invoice:
        return self.store.get_invoice(invoice_id)

    def delete_invoice(self, invoice_id: UUID) -> None:
        self.store.delete_invoice(invoice_id)

    def search_invoices(
        self,
        kind: InvoiceKind,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[InvoiceOut]:
        """Facturas del tipo, opcionalmente filtradas por nombre de parte y fechas"""
        results = SearchOrchestrator(self.store).search_invoices(kind, search, date_from, date_to)
        return [InvoiceOut.from_decorated(result) for result in results]
