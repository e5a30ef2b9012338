# ===================================
# sweetshop/repositories/user_repo.py
# ===================================
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select

from sweetshop.models.user import User, Role


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Récupérer un utilisateur par son email (comparaison exacte)"""
    return db.scalar(select(User).where(User.email == email))


def create_user(db: Session, email: str, password_hash: str,
                role: Role = Role.USER) -> User:
    """
    Créer un nouvel utilisateur.
    Une violation d'unicité sur l'email remonte en IntegrityError
    après annulation de la transaction.
    """
    db_user = User(
        email=email,
        password_hash=password_hash,
        role=role.value
    )

    db.add(db_user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_user)
    return db_user
