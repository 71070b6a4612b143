"""
Resolución de partes por fragmento de nombre.
"""

import logging
from typing import List
from uuid import UUID

from app.common.exceptions import AmbiguousPartyError, NotFoundError, ValidationError
from app.modules.invoices.models import InvoiceKind
from app.modules.ledger.roles import PARTY_LABEL_BY_ROLE

logger = logging.getLogger(__name__)


def normalize_fragment(fragment) -> str:
    return (fragment or "").strip()


class PartyResolver:
    """Busca clientes (rol 'venta') o proveedores (rol 'compra') por nombre."""

    def __init__(self, store):
        self.store = store

    def find(self, role: InvoiceKind, fragment: str) -> list:
        """Partes cuyo nombre contiene el fragmento, sin distinguir mayúsculas."""
        fragment = normalize_fragment(fragment)
        if not fragment:
            raise ValidationError("El fragmento de nombre no puede estar vacío")
        parties = self.store.find_parties_by_name_fragment(role, fragment)
        logger.debug(f"Name fragment {fragment!r} matched {len(parties)} {role.value} parties")
        return parties

    def resolve_by_name(self, role: InvoiceKind, fragment: str) -> List[UUID]:
        """
        Ids de las partes que coinciden. Sin coincidencias devuelve una lista
        vacía: es un resultado válido, no un error.
        """
        return [party.id for party in self.find(role, fragment)]

    def resolve_single(self, role: InvoiceKind, fragment: str):
        """
        Una única parte para el fragmento.

        Política: un nombre idéntico (sin distinguir mayúsculas) gana; si no lo
        hay, se acepta una única coincidencia parcial; varias coincidencias
        parciales son AmbiguousPartyError con los candidatos. Nunca se elige
        "la primera" en silencio.
        """
        candidates = self.find(role, fragment)
        if not candidates:
            raise NotFoundError(PARTY_LABEL_BY_ROLE[role], normalize_fragment(fragment))

        wanted = normalize_fragment(fragment).casefold()
        exact = [party for party in candidates if party.name.strip().casefold() == wanted]
        if len(exact) == 1:
            return exact[0]
        if len(candidates) == 1:
            return candidates[0]

        pool = exact or candidates
        raise AmbiguousPartyError(normalize_fragment(fragment), [party.name for party in pool])
