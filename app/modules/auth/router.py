from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from app.database.database import get_db
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.userDependencies import user_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import (
    LoginRequest, TokenResponse, UserCreate, UserUpdate, UserOut, PasswordSet
)
from app.modules.auth.service import AuthService, UserService

auth_router = APIRouter()
users_router = APIRouter(prefix="/users", tags=["Users"])


@auth_router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: db_dependency):
    """Iniciar sesión con email y contraseña"""
    auth_service = AuthService(db)
    return auth_service.authenticate_user(credentials.email, credentials.password)


@auth_router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: user_dependency):
    """Obtener información del usuario actual"""
    return current_user


@users_router.get("/", response_model=List[UserOut])
def list_users(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_admin())
):
    return UserService(db).list_users()


@users_router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_admin())
):
    return UserService(db).get_user(user_id)


@users_router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_admin())
):
    """Crear usuario. El rol por defecto es 'usuario'."""
    return UserService(db).create_user(user_data)


@users_router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: UUID,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_admin())
):
    return UserService(db).update_user(user_id, user_data)


@users_router.put("/{user_id}/set-password", response_model=dict)
def set_user_password(
    user_id: UUID,
    body: PasswordSet,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_admin())
):
    """Establecer nueva contraseña sin verificar la anterior"""
    UserService(db).set_password(user_id, body.new_password)
    return {"message": "Contraseña actualizada"}


@users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_admin())
):
    UserService(db).delete_user(user_id)
