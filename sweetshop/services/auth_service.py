# ===================================
# sweetshop/services/auth_service.py
# ===================================
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sweetshop.core.errors import ConflictError, InvalidCredentialsError, ValidationError
from sweetshop.core.security import (
    TokenService,
    dummy_verify_password,
    get_password_hash,
    verify_password,
)
from sweetshop.models.user import Role, User
from sweetshop.repositories.user_repo import create_user, get_user_by_email

logger = logging.getLogger(__name__)


class AuthService:
    """Service pour l'inscription et la connexion des utilisateurs"""

    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.token_service = token_service

    def register(self, email: str, password: str) -> User:
        """
        Inscription d'un nouvel utilisateur avec le rôle USER.

        Le contrôle d'unicité est fait avant l'insertion, et la contrainte
        UNIQUE de la base couvre la course entre ce contrôle et l'insertion.
        """
        self._require_credentials(email, password)

        if get_user_by_email(self.db, email):
            raise ConflictError("Un compte avec cet email existe déjà")

        password_hash = get_password_hash(password)
        try:
            user = create_user(self.db, email=email, password_hash=password_hash, role=Role.USER)
        except IntegrityError as exc:
            raise ConflictError("Un compte avec cet email existe déjà") from exc

        logger.info("Nouvel utilisateur inscrit id=%s", user.id)
        return user

    def login(self, email: str, password: str) -> str:
        """
        Connexion : retourne un jeton d'accès.
        Même erreur pour un email inconnu et un mauvais mot de passe.
        """
        self._require_credentials(email, password)

        user = get_user_by_email(self.db, email)
        if user is None:
            dummy_verify_password()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Échec de connexion")
            raise InvalidCredentialsError()

        return self.token_service.issue(user.id, user.role)

    @staticmethod
    def _require_credentials(email, password) -> None:
        if not email or not password:
            raise ValidationError("Email et mot de passe requis")
