# ===================================
# sweetshop/models/user.py
# ===================================
from enum import Enum

from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.sql import func

from sweetshop.core.database import Base


class Role(str, Enum):
    """Rôles du contrôle d'accès (modèle fixe à deux rôles)"""
    ADMIN = "ADMIN"
    USER = "USER"

    @classmethod
    def parse(cls, value):
        """Retourne le rôle correspondant ou None si la valeur est inconnue"""
        try:
            return cls(value)
        except ValueError:
            return None


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'USER')", name="check_user_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)

    # Authentification
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.USER.value)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
