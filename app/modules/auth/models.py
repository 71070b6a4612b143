from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TimestampMixin
import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"        # Gestión de usuarios y todas las operaciones
    USUARIO = "usuario"    # Operación diaria: partes, facturas, recibos, saldos


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(120), nullable=False)
    email = Column(String(120), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USUARIO.value)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
