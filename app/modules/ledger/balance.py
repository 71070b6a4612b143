"""
Motor de saldos.

Para cada parte combina el total facturado (cada factura con el signo de
su subtipo) con el total cobrado/pagado (efectivo + transferencia + otros
+ cheques de cada recibo) y produce saldo = facturado - cobrado.

El cálculo es una función pura de (rol, parte, contenido del store): no
guarda estado entre llamadas ni cachea saldos.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from app.modules.invoices.models import InvoiceKind
from app.modules.ledger.checks import receipt_total
from app.modules.ledger.classifier import signed_total
from app.modules.ledger.money import ZERO, format_money, net, round2
from app.modules.ledger.roles import party_id_of, receipt_kind_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Balance:
    """Saldo derivado de una parte. Nunca se persiste."""

    party_id: UUID
    party_name: str
    total_invoiced: Decimal
    total_collected: Decimal

    @property
    def saldo(self) -> Decimal:
        return round2(net(self.total_invoiced, self.total_collected))


def total_invoiced(invoices: Iterable) -> Decimal:
    total = ZERO
    for invoice in invoices:
        total += signed_total(invoice)
    return total


def total_collected(receipts: Iterable) -> Decimal:
    total = ZERO
    for receipt in receipts:
        total += receipt_total(receipt)
    return total


class BalanceAggregator:
    """Calcula saldos por parte a partir de un Ledger Store."""

    def __init__(self, store):
        self.store = store

    def compute_balance(self, party_id: UUID, role: InvoiceKind) -> Balance:
        """
        Saldo histórico (sin filtro de fechas) de una parte.

        Una parte sin facturas ni recibos tiene saldo cero; una parte
        inexistente es NotFoundError.
        """
        party = self.store.get_party(role, party_id)

        invoices = self.store.list_invoices(role, party_id=party_id)
        receipts = self.store.list_receipts(receipt_kind_for(role), party_id=party_id)

        balance = Balance(
            party_id=party.id,
            party_name=party.name,
            total_invoiced=total_invoiced(invoices),
            total_collected=total_collected(receipts),
        )
        logger.debug(f"Balance for {role.value} party {party_id}: {format_money(balance.saldo)}")
        return balance

    def compute_balances_for_all_parties(self, role: InvoiceKind) -> List[Balance]:
        """Un saldo por cada parte conocida del rol, incluidas las sin movimientos."""
        parties = self.store.list_parties(role)
        return self._aggregate(role, parties)

    def compute_balances(
        self,
        role: InvoiceKind,
        parties: Sequence,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Balance]:
        """
        Saldos de un subconjunto de partes, opcionalmente restringidos a un
        rango de fechas (variante usada por la búsqueda).
        """
        if not parties:
            return []
        return self._aggregate(
            role,
            parties,
            party_ids=[party.id for party in parties],
            date_from=date_from,
            date_to=date_to,
        )

    def _aggregate(
        self,
        role: InvoiceKind,
        parties: Sequence,
        party_ids: Optional[List[UUID]] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Balance]:
        # Facturas y recibos se leen una sola vez para todo el conjunto y se
        # acumulan en mapas por parte; una parte sin filas queda en cero.
        invoices = self.store.list_invoices(
            role, date_from=date_from, date_to=date_to, party_ids=party_ids
        )
        receipts = self.store.list_receipts(
            receipt_kind_for(role), date_from=date_from, date_to=date_to, party_ids=party_ids
        )

        invoiced: Dict[UUID, Decimal] = defaultdict(lambda: ZERO)
        collected: Dict[UUID, Decimal] = defaultdict(lambda: ZERO)

        for invoice in invoices:
            invoiced[party_id_of(invoice, role)] += signed_total(invoice)
        for receipt in receipts:
            collected[party_id_of(receipt, role)] += receipt_total(receipt)

        balances = [
            Balance(
                party_id=party.id,
                party_name=party.name,
                total_invoiced=invoiced[party.id],
                total_collected=collected[party.id],
            )
            for party in parties
        ]
        logger.info(
            f"Computed {len(balances)} {role.value} balances "
            f"({len(invoices)} invoices, {len(receipts)} receipts)"
        )
        return balances
