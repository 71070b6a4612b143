from app.database.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Date, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from datetime import date
from uuid import uuid4
from app.common.mixins import BaseMixin, TimestampMixin
import enum


class InvoiceKind(str, enum.Enum):
    VENTA = "venta"      # Facturación a clientes
    COMPRA = "compra"    # Facturación de proveedores


class InvoiceSubtype(str, enum.Enum):
    FACTURA = "factura"
    NOTA_CREDITO = "nota de crédito"
    NOTA_DEBITO = "nota de débito"
    SALDO_INICIAL = "saldo inicial"


class Invoice(Base, BaseMixin):
    __tablename__ = "invoices"

    number = Column(String(50), nullable=False)
    date = Column(Date, nullable=False, default=date.today, index=True)

    # Literales persistidos tal cual ('venta', 'nota de crédito', ...).
    # subtype es texto libre a nivel de tabla: los valores desconocidos se
    # leen y se excluyen del saldo en lugar de romper la carga.
    kind = Column(String(10), nullable=False, index=True)
    subtype = Column(String(30), nullable=False, default=InvoiceSubtype.FACTURA.value)

    client_id = Column(UUID(as_uuid=True), ForeignKey("clients.id"), nullable=True, index=True)
    supplier_id = Column(UUID(as_uuid=True), ForeignKey("suppliers.id"), nullable=True, index=True)

    # Totals (calculated)
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    iva = Column(Numeric(15, 2), nullable=False, default=0)
    total = Column(Numeric(15, 2), nullable=False, default=0)

    # Relationships
    client = relationship("Client")
    supplier = relationship("Supplier")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )

    __table_args__ = (
        CheckConstraint(
            "(kind = 'venta' AND client_id IS NOT NULL AND supplier_id IS NULL) OR "
            "(kind = 'compra' AND supplier_id IS NOT NULL AND client_id IS NULL)",
            name="ck_invoice_party_matches_kind",
        ),
    )

    @property
    def party_id(self):
        return self.client_id if self.kind == InvoiceKind.VENTA.value else self.supplier_id

    @property
    def party_name(self):
        party = self.client if self.kind == InvoiceKind.VENTA.value else self.supplier
        return party.name if party is not None else None


class InvoiceItem(Base, TimestampMixin):
    __tablename__ = "invoice_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    invoice_id = Column(UUID(as_uuid=True), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(255), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)  # Permitir decimales para servicios
    unit_price = Column(Numeric(15, 2), nullable=False)  # Precio sin IVA

    # Relationships
    invoice = relationship("Invoice", back_populates="items")

    @property
    def line_subtotal(self):
        return self.quantity * self.unit_price
