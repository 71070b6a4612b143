"""
Validadores de documentos fiscales (CUIT/CUIL) y contacto
"""
import re
from typing import Optional


CUIT_MULTIPLIERS = [5, 4, 3, 2, 7, 6, 5, 4, 3, 2]
CUIT_PREFIXES = {"20", "23", "24", "27", "30", "33", "34"}


def _clean_cuit(cuit: str) -> str:
    return re.sub(r'[\.\s\-]', '', cuit or "")


def calculate_cuit_check_digit(base: str) -> Optional[int]:
    """
    Calcula el dígito verificador de un CUIT a partir de sus 10 primeros dígitos.
    Retorna None si el resultado es 10 (combinación no emitida por AFIP).
    """
    if len(base) != 10 or not base.isdigit():
        return None

    suma = sum(int(d) * m for d, m in zip(base, CUIT_MULTIPLIERS))
    resto = 11 - (suma % 11)

    if resto == 11:
        return 0
    if resto == 10:
        return None
    return resto


def validate_cuit(cuit: str) -> bool:
    """
    Valida CUIT/CUIL argentino.
    - 11 dígitos (se aceptan guiones, puntos y espacios)
    - Prefijo de tipo conocido (20, 23, 24, 27, 30, 33, 34)
    - Dígito verificador correcto
    Ejemplo: 20-12345678-6
    """
    cleaned = _clean_cuit(cuit)

    if len(cleaned) != 11 or not cleaned.isdigit():
        return False

    if cleaned[:2] not in CUIT_PREFIXES:
        return False

    digito = calculate_cuit_check_digit(cleaned[:10])
    return digito is not None and digito == int(cleaned[-1])


def format_cuit(cuit: str) -> str:
    """
    Formatea CUIT al formato estándar XX-XXXXXXXX-X
    """
    if not validate_cuit(cuit):
        return cuit  # Retorna sin cambios si no es válido

    cleaned = _clean_cuit(cuit)
    return f"{cleaned[:2]}-{cleaned[2:10]}-{cleaned[10]}"


def is_valid_email(email: str) -> bool:
    """
    Validación básica de email
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))
