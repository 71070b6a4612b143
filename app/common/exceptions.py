"""
Excepciones de dominio del backend de cuentas corrientes.

El núcleo (store, agregador, resolver, búsquedas) no conoce HTTP: lanza
estas excepciones tipadas y `register_exception_handlers` las traduce a
respuestas en el borde de la aplicación.

Jerarquía:
    LedgerError
    ├── ValidationError        → datos inválidos, se rechaza antes del store
    ├── NotFoundError          → parte/factura/recibo inexistente
    ├── ConflictError          → documento fiscal o email duplicado
    ├── AmbiguousPartyError    → la búsqueda por nombre devolvió varias partes
    └── StoreUnavailable       → fallo de conectividad o de transacción
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Excepción base. Todas las demás heredan de esta."""

    code = "ledger_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message}


class ValidationError(LedgerError):
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(LedgerError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} no encontrado")


class ConflictError(LedgerError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class AmbiguousPartyError(LedgerError):
    """Varias partes coinciden con el fragmento y no hay una exacta."""

    code = "ambiguous_party"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, fragment: str, candidates: List[str]):
        self.fragment = fragment
        self.candidates = candidates
        super().__init__(
            f"El nombre '{fragment}' coincide con {len(candidates)} partes: {', '.join(candidates)}"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["candidates"] = self.candidates
        return data


class StoreUnavailable(LedgerError):
    code = "store_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, operation: str, cause: Optional[Exception] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Error de almacenamiento en {operation}")

    def to_dict(self) -> dict:
        # Nunca exponer el detalle interno del almacenamiento
        return {"code": self.code, "detail": "Servicio de datos no disponible, intente nuevamente"}


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    if isinstance(exc, StoreUnavailable):
        logger.error(f"{exc.message} ({request.method} {request.url.path}): {exc.cause}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Registrar el mapeo de excepciones de dominio a respuestas HTTP."""
    app.add_exception_handler(LedgerError, ledger_error_handler)
