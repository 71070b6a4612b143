"""
Módulo de Facturación (Invoices)

- Facturas de venta (clientes) y de compra (proveedores)
- Subtipos: factura, nota de crédito, nota de débito, saldo inicial
- Ítems con cálculo de subtotal, IVA y total
- Alta y reemplazo atómicos de factura + ítems
- Búsqueda por nombre de parte y rango de fechas
"""

from .models import Invoice, InvoiceItem, InvoiceKind, InvoiceSubtype

__all__ = [
    "Invoice", "InvoiceItem", "InvoiceKind", "InvoiceSubtype",
]
