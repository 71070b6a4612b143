"""
Utilidades para montos monetarios.

Todo monto que alimenta un saldo se maneja como Decimal: sumar floats
pierde centavos en acumulados largos. Las sumas y restas son exactas (y
por lo tanto independientes del orden); el redondeo a centavos se aplica
una sola vez, al final, antes de que el valor salga del sistema.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Union

ZERO = Decimal("0")
CENT = Decimal("0.01")

Amount = Union[Decimal, int, float, str, None]


def to_decimal(value: Amount) -> Decimal:
    """Convierte un valor almacenado o recibido a Decimal.

    None se interpreta como cero (columnas opcionales de medios de pago).
    Los float se convierten vía str para no arrastrar el error binario.

    Raises:
        ValueError: si el valor no representa un número.

    Ejemplos:
        >>> to_decimal("150.10")
        Decimal('150.10')
        >>> to_decimal(None)
        Decimal('0')
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"No se pudo convertir a monto: {value!r}")


def money_sum(values: Iterable[Amount]) -> Decimal:
    """Suma exacta de montos. Una secuencia vacía suma cero."""
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return total


def net(invoiced: Amount, collected: Amount) -> Decimal:
    """Saldo sin redondear: facturado menos cobrado/pagado."""
    return to_decimal(invoiced) - to_decimal(collected)


def scale(amount: Amount, rate: Amount) -> Decimal:
    """Multiplica un monto por una tasa (p. ej. IVA) sin redondear."""
    return to_decimal(amount) * to_decimal(rate)


def round2(amount: Amount) -> Decimal:
    """Redondeo terminal a centavos (mitad hacia arriba)."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Amount) -> str:
    """Formatea un monto para logs.

    Ejemplos:
        >>> format_money(Decimal("1234567.891"))
        '$1,234,567.89'
        >>> format_money(Decimal("-5"))
        '-$5.00'
    """
    rounded = round2(amount)
    if rounded < 0:
        return f"-${abs(rounded):,.2f}"
    return f"${rounded:,.2f}"
