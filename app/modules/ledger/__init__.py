"""
Motor de cuenta corriente

- Clasificación de subtipos de factura (signo)
- Reducción de cheques de recibos
- Saldos por parte (individual, en lote y por búsqueda)
- Resolución de partes por nombre
"""
