"""
Modelos SQLAlchemy para Clientes y Proveedores

Ambas entidades comparten la misma forma (PartyMixin) pero viven en tablas
separadas: los clientes se facturan con facturas de venta y cobros, los
proveedores con facturas de compra y pagos.
"""

from app.database.database import Base
from sqlalchemy import Column, String, Text
from app.common.mixins import BaseMixin


class PartyMixin(BaseMixin):
    """Atributos comunes de una parte (cliente o proveedor)"""

    name = Column(String(200), nullable=False, index=True)
    address = Column(Text, nullable=True)
    tax_id = Column(String(13), nullable=True, index=True)  # CUIT, único por tabla si se informa
    email = Column(String(120), nullable=True)
    phone = Column(String(50), nullable=True)


class Client(Base, PartyMixin):
    __tablename__ = "clients"


class Supplier(Base, PartyMixin):
    __tablename__ = "suppliers"
