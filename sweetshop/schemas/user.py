# ===================================
# sweetshop/schemas/user.py
# ===================================
from typing import Optional
from pydantic import BaseModel


class UserCreate(BaseModel):
    # Champs optionnels ici : l'absence est signalée par le service (400)
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class User(BaseModel):
    """Utilisateur exposé par l'API, jamais avec son hash"""
    id: int
    email: str
    role: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    token: str
