"""
Ledger Store: acceso a facturas, recibos y partes sobre SQLAlchemy.

Lecturas filtrables por parte, tipo y rango de fechas; escrituras atómicas
sobre documento + hijos (ítems o cheques). Cualquier error de SQLAlchemy se
propaga como StoreUnavailable; el store no reintenta.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.common.exceptions import NotFoundError, StoreUnavailable
from app.database.database import atomic
from app.modules.invoices.models import Invoice, InvoiceItem, InvoiceKind
from app.modules.ledger.roles import (
    PARTY_LABEL_BY_ROLE, party_model_for, party_field_for, role_for_receipt_kind
)
from app.modules.receipts.models import Receipt, ReceiptCheck, ReceiptKind

logger = logging.getLogger(__name__)


def escape_like(fragment: str) -> str:
    """Escapa comodines de LIKE para que el fragmento se busque literal."""
    return fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class LedgerStore:
    """Colaborador de persistencia del motor de saldos."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Store failure during {operation}: {e}", exc_info=True)
            raise StoreUnavailable(operation, e) from e

    # ===== PARTES =====

    def list_parties(self, role: InvoiceKind, party_ids: Optional[Iterable[UUID]] = None) -> list:
        """Partes del rol ordenadas por nombre (todas, con o sin movimientos)."""
        model = party_model_for(role)
        with self._guard("list_parties"):
            query = self.db.query(model)
            if party_ids is not None:
                query = query.filter(model.id.in_(list(party_ids)))
            return query.order_by(model.name, model.id).all()

    def get_party(self, role: InvoiceKind, party_id: UUID):
        model = party_model_for(role)
        with self._guard("get_party"):
            party = self.db.query(model).filter(model.id == party_id).first()
        if party is None:
            raise NotFoundError(PARTY_LABEL_BY_ROLE[role], party_id)
        return party

    def find_parties_by_name_fragment(self, role: InvoiceKind, fragment: str) -> list:
        """Coincidencia por subcadena sin distinguir mayúsculas, en orden por nombre."""
        model = party_model_for(role)
        pattern = f"%{escape_like(fragment)}%"
        with self._guard("find_parties_by_name_fragment"):
            return (
                self.db.query(model)
                .filter(model.name.ilike(pattern, escape="\\"))
                .order_by(model.name, model.id)
                .all()
            )

    # ===== LECTURAS DE DOCUMENTOS =====

    def _apply_filters(self, query, model, party_field: str, party_id, party_ids, date_from, date_to):
        if party_id is not None:
            query = query.filter(getattr(model, party_field) == party_id)
        if party_ids is not None:
            query = query.filter(getattr(model, party_field).in_(list(party_ids)))
        # Un rango invertido no se corrige: simplemente no devuelve filas
        if date_from is not None:
            query = query.filter(model.date >= date_from)
        if date_to is not None:
            query = query.filter(model.date <= date_to)
        return query.order_by(model.date.desc())

    def list_invoices(
        self,
        role: InvoiceKind,
        party_id: Optional[UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        party_ids: Optional[Sequence[UUID]] = None,
    ) -> List[Invoice]:
        with self._guard("list_invoices"):
            query = self.db.query(Invoice).options(
                selectinload(Invoice.client),
                selectinload(Invoice.supplier),
            ).filter(Invoice.kind == role.value)
            query = self._apply_filters(
                query, Invoice, party_field_for(role), party_id, party_ids, date_from, date_to
            )
            return query.all()

    def list_receipts(
        self,
        kind: ReceiptKind,
        party_id: Optional[UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        party_ids: Optional[Sequence[UUID]] = None,
    ) -> List[Receipt]:
        role = role_for_receipt_kind(kind)
        with self._guard("list_receipts"):
            query = self.db.query(Receipt).options(
                selectinload(Receipt.checks),
                selectinload(Receipt.client),
                selectinload(Receipt.supplier),
            ).filter(Receipt.kind == kind.value)
            query = self._apply_filters(
                query, Receipt, party_field_for(role), party_id, party_ids, date_from, date_to
            )
            return query.all()

    def get_invoice(self, invoice_id: UUID) -> Invoice:
        with self._guard("get_invoice"):
            invoice = self.db.query(Invoice).options(
                selectinload(Invoice.items),
                selectinload(Invoice.client),
                selectinload(Invoice.supplier),
            ).filter(Invoice.id == invoice_id).first()
        if invoice is None:
            raise NotFoundError("Factura", invoice_id)
        return invoice

    def get_receipt(self, receipt_id: UUID) -> Receipt:
        with self._guard("get_receipt"):
            receipt = self.db.query(Receipt).options(
                selectinload(Receipt.checks),
                selectinload(Receipt.client),
                selectinload(Receipt.supplier),
            ).filter(Receipt.id == receipt_id).first()
        if receipt is None:
            raise NotFoundError("Recibo", receipt_id)
        return receipt

    # ===== ESCRITURAS ATÓMICAS =====

    @staticmethod
    def _number_children(children: Sequence) -> list:
        numbered = list(children)
        for position, child in enumerate(numbered):
            child.position = position
        return numbered

    def _replace_children(self, collection: list, children: Sequence) -> None:
        # Borrar hijos, insertar los nuevos; todo dentro de la misma transacción
        collection.clear()
        self.db.flush()
        collection.extend(self._number_children(children))

    def create_invoice(self, invoice: Invoice, items: Sequence[InvoiceItem]) -> UUID:
        with self._guard("create_invoice"):
            with atomic(self.db):
                invoice.items = self._number_children(items)
                self.db.add(invoice)
                self.db.flush()
        logger.info(f"Invoice {invoice.number} ({invoice.kind}/{invoice.subtype}) created with {len(items)} items")
        return invoice.id

    def replace_invoice(self, invoice_id: UUID, values: dict, items: Sequence[InvoiceItem]) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        with self._guard("replace_invoice"):
            with atomic(self.db):
                self._replace_children(invoice.items, items)
                for field, value in values.items():
                    setattr(invoice, field, value)
        logger.info(f"Invoice {invoice_id} replaced with {len(items)} items")
        return invoice

    def delete_invoice(self, invoice_id: UUID) -> None:
        invoice = self.get_invoice(invoice_id)
        with self._guard("delete_invoice"):
            with atomic(self.db):
                # Los recibos imputados quedan sin factura vinculada
                self.db.query(Receipt).filter(Receipt.invoice_id == invoice_id).update(
                    {Receipt.invoice_id: None}, synchronize_session=False
                )
                self.db.delete(invoice)
        logger.info(f"Invoice {invoice_id} deleted")

    def create_receipt(self, receipt: Receipt, checks: Sequence[ReceiptCheck]) -> UUID:
        with self._guard("create_receipt"):
            with atomic(self.db):
                receipt.checks = self._number_children(checks)
                self.db.add(receipt)
                self.db.flush()
        logger.info(f"Receipt {receipt.number} ({receipt.kind}) created with {len(checks)} checks")
        return receipt.id

    def replace_receipt(self, receipt_id: UUID, values: dict, checks: Sequence[ReceiptCheck]) -> Receipt:
        receipt = self.get_receipt(receipt_id)
        with self._guard("replace_receipt"):
            with atomic(self.db):
                self._replace_children(receipt.checks, checks)
                for field, value in values.items():
                    setattr(receipt, field, value)
        logger.info(f"Receipt {receipt_id} replaced with {len(checks)} checks")
        return receipt

    def delete_receipt(self, receipt_id: UUID) -> None:
        receipt = self.get_receipt(receipt_id)
        with self._guard("delete_receipt"):
            with atomic(self.db):
                self.db.delete(receipt)
        logger.info(f"Receipt {receipt_id} deleted")

    def count_documents_for_party(self, role: InvoiceKind, party_id: UUID) -> int:
        """Cantidad de facturas y recibos que referencian a una parte."""
        field = party_field_for(role)
        with self._guard("count_documents_for_party"):
            invoices = self.db.query(Invoice).filter(getattr(Invoice, field) == party_id).count()
            receipts = self.db.query(Receipt).filter(getattr(Receipt, field) == party_id).count()
        return invoices + receipts
