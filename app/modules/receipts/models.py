from app.database.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Date, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from datetime import date
from uuid import uuid4
from app.common.mixins import BaseMixin, TimestampMixin
import enum


class ReceiptKind(str, enum.Enum):
    COBRO = "cobro"    # Cobranza a clientes
    PAGO = "pago"      # Pago a proveedores


class Receipt(Base, BaseMixin):
    __tablename__ = "receipts"

    number = Column(String(50), nullable=True)
    date = Column(Date, nullable=False, default=date.today, index=True)
    kind = Column(String(10), nullable=False, index=True)

    client_id = Column(UUID(as_uuid=True), ForeignKey("clients.id"), nullable=True, index=True)
    supplier_id = Column(UUID(as_uuid=True), ForeignKey("suppliers.id"), nullable=True, index=True)
    # Factura imputada (opcional); borrar la factura no borra el recibo
    invoice_id = Column(UUID(as_uuid=True), ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True)

    # Medios de pago
    cash = Column(Numeric(15, 2), nullable=False, default=0)
    transfer = Column(Numeric(15, 2), nullable=False, default=0)
    other = Column(Numeric(15, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    total = Column(Numeric(15, 2), nullable=False, default=0)

    # Relationships
    client = relationship("Client")
    supplier = relationship("Supplier")
    invoice = relationship("Invoice")
    checks = relationship(
        "ReceiptCheck",
        back_populates="receipt",
        cascade="all, delete-orphan",
        order_by="ReceiptCheck.position",
    )

    __table_args__ = (
        CheckConstraint(
            "(kind = 'cobro' AND client_id IS NOT NULL AND supplier_id IS NULL) OR "
            "(kind = 'pago' AND supplier_id IS NOT NULL AND client_id IS NULL)",
            name="ck_receipt_party_matches_kind",
        ),
    )

    @property
    def party_id(self):
        return self.client_id if self.kind == ReceiptKind.COBRO.value else self.supplier_id

    @property
    def party_name(self):
        party = self.client if self.kind == ReceiptKind.COBRO.value else self.supplier
        return party.name if party is not None else None


class ReceiptCheck(Base, TimestampMixin):
    __tablename__ = "receipt_checks"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    receipt_id = Column(UUID(as_uuid=True), ForeignKey("receipts.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    check_type = Column(String(30), nullable=True)  # común, diferido, ...
    clearing_date = Column(Date, nullable=True)      # Fecha de cobro
    bank = Column(String(100), nullable=True)
    number = Column(String(50), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)

    # Relationships
    receipt = relationship("Receipt", back_populates="checks")
