from typing import List, Optional
from uuid import UUID
from datetime import date
import logging

from sqlalchemy.orm import Session

from app.common.exceptions import NotFoundError, ValidationError
from app.modules.ledger.checks import reduce_checks
from app.modules.ledger.money import money_sum, round2
from app.modules.ledger.roles import PARTY_LABEL_BY_ROLE, party_field_for, role_for_receipt_kind
from app.modules.ledger.search import SearchOrchestrator
from app.modules.ledger.store import LedgerStore
from app.modules.receipts.models import Receipt, ReceiptCheck, ReceiptKind
from app.modules.receipts.schemas import ReceiptCreate, ReceiptOut

logger = logging.getLogger(__name__)


class ReceiptService:
    def __init__(self, db: Session):
        self.db = db
        self.store = LedgerStore(db)

    def validate_receipt_data(self, receipt_data: ReceiptCreate) -> None:
        """La parte debe corresponder al tipo y la factura imputada a la misma parte."""
        if receipt_data.kind == ReceiptKind.COBRO:
            if not receipt_data.client_id:
                raise ValidationError('client_id requerido para tipo "cobro"')
            if receipt_data.supplier_id:
                raise ValidationError('Un recibo de cobro no puede tener supplier_id')
            party_id = receipt_data.client_id
        else:
            if not receipt_data.supplier_id:
                raise ValidationError('supplier_id requerido para tipo "pago"')
            if receipt_data.client_id:
                raise ValidationError('Un recibo de pago no puede tener client_id')
            party_id = receipt_data.supplier_id

        role = role_for_receipt_kind(receipt_data.kind)
        try:
            self.store.get_party(role, party_id)
        except NotFoundError:
            raise ValidationError(f"{PARTY_LABEL_BY_ROLE[role]} {party_id} no existe")

        if receipt_data.invoice_id:
            try:
                invoice = self.store.get_invoice(receipt_data.invoice_id)
            except NotFoundError:
                raise ValidationError(f"Factura {receipt_data.invoice_id} no existe")
            if invoice.kind != role.value or getattr(invoice, party_field_for(role)) != party_id:
                raise ValidationError("La factura imputada pertenece a otra parte")

    def _build(self, receipt_data: ReceiptCreate):
        checks = [ReceiptCheck(**check.model_dump()) for check in receipt_data.checks]
        values = receipt_data.model_dump(exclude={"checks"})
        values["kind"] = receipt_data.kind.value
        values["total"] = round2(
            money_sum((receipt_data.cash, receipt_data.transfer, receipt_data.other)) + reduce_checks(checks)
        )
        return values, checks

    def create_receipt(self, receipt_data: ReceiptCreate) -> Receipt:
        self.validate_receipt_data(receipt_data)
        values, checks = self._build(receipt_data)
        receipt_id = self.store.create_receipt(Receipt(**values), checks)
        return self.store.get_receipt(receipt_id)

    def replace_receipt(self, receipt_id: UUID, receipt_data: ReceiptCreate) -> Receipt:
        """Reemplazar el recibo completo, incluidos todos sus cheques"""
        self.store.get_receipt(receipt_id)
        self.validate_receipt_data(receipt_data)
        values, checks = self._build(receipt_data)
        self.store.replace_receipt(receipt_id, values, checks)
        return self.store.get_receipt(receipt_id)

    def get_receipt(self, receipt_id: UUID) -> Receipt:
        return self.store.get_receipt(receipt_id)

    def delete_receipt(self, receipt_id: UUID) -> None:
        self.store.delete_receipt(receipt_id)

    def search_receipts(
        self,
        kind: ReceiptKind,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[ReceiptOut]:
        results = SearchOrchestrator(self.store).search_receipts(kind, search, date_from, date_to)
        return [ReceiptOut.from_decorated(result) for result in results]
