"""
Servicio de Clientes y Proveedores.

Un mismo servicio atiende ambas tablas según el rol: 'venta' opera sobre
clientes y 'compra' sobre proveedores.
"""

from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.common.exceptions import ConflictError
from app.database.database import atomic
from app.modules.invoices.models import InvoiceKind
from app.modules.ledger.resolver import normalize_fragment
from app.modules.ledger.roles import PARTY_LABEL_BY_ROLE, party_model_for
from app.modules.ledger.store import LedgerStore
from app.modules.parties.schemas import PartyCreate, PartyUpdate

logger = logging.getLogger(__name__)


class PartyService:
    def __init__(self, db: Session, role: InvoiceKind):
        self.db = db
        self.role = role
        self.model = party_model_for(role)
        self.label = PARTY_LABEL_BY_ROLE[role]
        self.store = LedgerStore(db)

    def list_parties(self, search: Optional[str] = None) -> List:
        """Partes ordenadas por nombre, opcionalmente filtradas por fragmento"""
        if normalize_fragment(search):
            return self.store.find_parties_by_name_fragment(self.role, normalize_fragment(search))
        return self.store.list_parties(self.role)

    def get_party(self, party_id: UUID):
        return self.store.get_party(self.role, party_id)

    def _ensure_tax_id_free(self, tax_id: Optional[str], exclude_id: UUID = None):
        if not tax_id:
            return
        query = self.db.query(self.model).filter(self.model.tax_id == tax_id)
        if exclude_id:
            query = query.filter(self.model.id != exclude_id)
        if query.first():
            raise ConflictError(f"Ya existe un {self.label.lower()} con el CUIT {tax_id}")

    def create_party(self, party_data: PartyCreate):
        self._ensure_tax_id_free(party_data.tax_id)

        party = self.model(**party_data.model_dump())
        with atomic(self.db):
            self.db.add(party)
        self.db.refresh(party)

        logger.info(f"{self.label} {party.name} created")
        return party

    def update_party(self, party_id: UUID, party_update: PartyUpdate):
        party = self.get_party(party_id)

        update_data = party_update.model_dump(exclude_unset=True)
        if update_data.get("name") is None:
            update_data.pop("name", None)
        if update_data.get("tax_id") and update_data["tax_id"] != party.tax_id:
            self._ensure_tax_id_free(update_data["tax_id"], exclude_id=party_id)

        with atomic(self.db):
            for field, value in update_data.items():
                setattr(party, field, value)
        self.db.refresh(party)
        return party

    def delete_party(self, party_id: UUID) -> None:
        """Eliminar una parte sin facturas ni recibos asociados"""
        party = self.get_party(party_id)

        documents = self.store.count_documents_for_party(self.role, party_id)
        if documents:
            raise ConflictError(
                f"No se puede eliminar el {self.label.lower()}: tiene {documents} documentos asociados"
            )

        with atomic(self.db):
            self.db.delete(party)
        logger.info(f"{self.label} {party_id} deleted")
