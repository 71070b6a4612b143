"""
Búsqueda de facturas, recibos y saldos por nombre de parte y rango de fechas.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Optional

from app.modules.invoices.models import InvoiceKind
from app.modules.ledger.balance import Balance, BalanceAggregator
from app.modules.ledger.resolver import PartyResolver, normalize_fragment
from app.modules.ledger.roles import party_id_of, role_for_receipt_kind
from app.modules.receipts.models import ReceiptKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecoratedRecord:
    """Documento del store más el nombre de su parte. El documento no se modifica."""

    record: Any
    party_name: Optional[str]


class SearchOrchestrator:
    """
    Compone Party Resolver + filtros del Ledger Store.

    Con fragmento de nombre sin coincidencias devuelve vacío sin consultar
    facturas ni recibos. Un rango de fechas invertido no se valida: el store
    simplemente no devuelve filas.
    """

    def __init__(self, store, resolver: Optional[PartyResolver] = None):
        self.store = store
        self.resolver = resolver or PartyResolver(store)

    def search_invoices(
        self,
        kind: InvoiceKind,
        name_fragment: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[DecoratedRecord]:
        return self._search(kind, self.store.list_invoices, kind, name_fragment, date_from, date_to)

    def search_receipts(
        self,
        kind: ReceiptKind,
        name_fragment: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[DecoratedRecord]:
        role = role_for_receipt_kind(kind)
        return self._search(role, self.store.list_receipts, kind, name_fragment, date_from, date_to)

    def search_balances(
        self,
        role: InvoiceKind,
        name_fragment: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Balance]:
        """Saldos de las partes que coinciden, restringidos al rango de fechas."""
        if normalize_fragment(name_fragment):
            parties = self.resolver.find(role, name_fragment)
            if not parties:
                return []
        else:
            parties = self.store.list_parties(role)
        return BalanceAggregator(self.store).compute_balances(role, parties, date_from, date_to)

    def _search(
        self,
        role: InvoiceKind,
        fetch: Callable,
        kind,
        name_fragment: Optional[str],
        date_from: Optional[date],
        date_to: Optional[date],
    ) -> List[DecoratedRecord]:
        party_ids = None
        if normalize_fragment(name_fragment):
            parties = self.resolver.find(role, name_fragment)
            if not parties:
                logger.debug(f"No {role.value} party matches {name_fragment!r}; skipping document query")
                return []
            party_ids = [party.id for party in parties]
            names = {party.id: party.name for party in parties}
        else:
            names = {party.id: party.name for party in self.store.list_parties(role)}

        rows = fetch(kind, date_from=date_from, date_to=date_to, party_ids=party_ids)

        # Fecha descendente; sort estable conserva el orden del store en empates
        rows = sorted(rows, key=lambda row: row.date, reverse=True)
        return [DecoratedRecord(record=row, party_name=names.get(party_id_of(row, role))) for row in rows]
