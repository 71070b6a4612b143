"""
Reducción del sub-libro de cheques de un recibo.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from app.modules.ledger.money import ZERO, money_sum, to_decimal

logger = logging.getLogger(__name__)


def reduce_checks(checks: Optional[Iterable]) -> Decimal:
    """
    Suma de los montos de los cheques de un recibo.

    No rechaza montos negativos (eso es responsabilidad de quien escribe
    el recibo); los suma tal cual y deja constancia en el log.
    """
    total = ZERO
    for check in checks or ():
        amount = to_decimal(check.amount)
        if amount < 0:
            logger.warning(
                f"Anomaly: check {getattr(check, 'id', '?')} has negative amount {amount}"
            )
        total += amount
    return total


def receipt_total(receipt) -> Decimal:
    """Efectivo + transferencia + otros + cheques, sin redondear."""
    return money_sum((receipt.cash, receipt.transfer, receipt.other)) + reduce_checks(receipt.checks)
