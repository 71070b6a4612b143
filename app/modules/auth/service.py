"""
Servicio de autenticación y gestión de usuarios.
"""
from datetime import datetime, timezone
from typing import List
from uuid import UUID
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.common.exceptions import ConflictError, NotFoundError
from app.database.database import atomic
from app.modules.auth.models import User, UserRole
from app.modules.auth.schemas import UserCreate, UserUpdate, TokenResponse, UserOut
from app.modules.auth.utils import hash_password, verify_password, create_access_token
from app.core.config import settings

logger = logging.getLogger(__name__)


class AuthService:
    """Emisión de tokens a partir de email y contraseña."""

    def __init__(self, db: Session):
        self.db = db

    def authenticate_user(self, email: str, password: str) -> TokenResponse:
        """
        Autenticar usuario y generar token.

        Un email inexistente y una contraseña incorrecta devuelven el mismo
        error para no revelar qué usuarios existen.
        """
        user = self.db.query(User).filter(User.email == email).first()

        if not user or not verify_password(password, user.password):
            logger.info(f"Failed login attempt for {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email o contraseña incorrectos"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Usuario inactivo"
            )

        with atomic(self.db):
            user.last_login = datetime.now(timezone.utc)

        access_token = create_access_token(data={"sub": str(user.id), "rol": user.role})

        return TokenResponse(
            access_token=access_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserOut.model_validate(user)
        )


class UserService:
    """CRUD de usuarios. Las contraseñas se guardan siempre hasheadas."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.name).all()

    def get_user(self, user_id: UUID) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("Usuario", user_id)
        return user

    def _ensure_email_free(self, email: str, exclude_id: UUID = None):
        query = self.db.query(User).filter(User.email == email)
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise ConflictError("El email ya está registrado")

    def create_user(self, user_data: UserCreate) -> User:
        self._ensure_email_free(user_data.email)

        user = User(
            name=user_data.name,
            email=user_data.email,
            password=hash_password(user_data.password),
            role=user_data.role.value,
        )
        with atomic(self.db):
            self.db.add(user)
        self.db.refresh(user)

        logger.info(f"User {user.email} created with role {user.role}")
        return user

    def update_user(self, user_id: UUID, user_update: UserUpdate) -> User:
        user = self.get_user(user_id)

        update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in update_data and update_data["email"] != user.email:
            self._ensure_email_free(update_data["email"], exclude_id=user_id)

        with atomic(self.db):
            for field, value in update_data.items():
                if isinstance(value, UserRole):
                    value = value.value
                setattr(user, field, value)
        self.db.refresh(user)
        return user

    def set_password(self, user_id: UUID, new_password: str) -> None:
        """Establecer nueva contraseña sin pedir la actual (operación de admin)."""
        user = self.get_user(user_id)
        with atomic(self.db):
            user.password = hash_password(new_password)
        logger.info(f"Password reset for user {user.email}")

    def delete_user(self, user_id: UUID) -> None:
        user = self.get_user(user_id)
        with atomic(self.db):
            self.db.delete(user)
        logger.info(f"User {user_id} deleted")
