# ===================================
# sweetshop/api/v1/auth.py
# ===================================
from typing import Any
from fastapi import APIRouter, Depends, status

from sweetshop.api.deps import get_auth_service
from sweetshop.services.auth_service import AuthService
from sweetshop.schemas.user import UserCreate, LoginRequest, User, Token

router = APIRouter()


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
) -> Any:
    """
    Inscription d'un nouvel utilisateur (rôle USER)
    """
    user = auth_service.register(user_data.email, user_data.password)
    return User.model_validate(user)


@router.post("/login", response_model=Token)
def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> Any:
    """
    Connexion d'un utilisateur
    """
    token = auth_service.login(login_data.email, login_data.password)
    return Token(token=token)
