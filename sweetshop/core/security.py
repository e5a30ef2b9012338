# ===================================
# sweetshop/core/security.py
# ===================================

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext

from sweetshop.core.errors import ConfigurationError, InvalidTokenError

logger = logging.getLogger(__name__)

# Configuration du hachage des mots de passe
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def configure_password_hashing(rounds: int) -> None:
    """Ajuster le coût bcrypt (~quelques dizaines de ms par hachage à 10)"""
    pwd_context.update(bcrypt__rounds=rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifier un mot de passe"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Hash stocké illisible : traité comme un mot de passe incorrect
        return False


def dummy_verify_password() -> None:
    """
    Vérification factice au coût bcrypt courant, pour qu'un email inconnu
    prenne le même temps qu'un mauvais mot de passe
    """
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    """Hacher un mot de passe"""
    return pwd_context.hash(password)


@dataclass(frozen=True)
class TokenPayload:
    """Contenu vérifié d'un jeton d'accès"""
    user_id: int
    role: str


class TokenService:
    """Émission et vérification des jetons d'accès JWT"""

    def __init__(self, secret_key: Optional[str], algorithm: str = "HS256",
                 expire_minutes: int = 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int, role: str, now: Optional[datetime] = None) -> str:
        """Créer un token d'accès JWT portant l'identifiant et le rôle"""
        if not self.secret_key:
            raise ConfigurationError("Secret de signature JWT non configuré")

        issued_at = now or datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user_id),
            "role": role,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """Décoder et valider un token JWT"""
        if not self.secret_key:
            raise InvalidTokenError()

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.debug("Jeton rejeté: %s", exc)
            raise InvalidTokenError() from exc

        subject = payload.get("sub")
        role = payload.get("role")
        if subject is None or not isinstance(role, str):
            raise InvalidTokenError()

        try:
            user_id = int(subject)
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc

        return TokenPayload(user_id=user_id, role=role)
