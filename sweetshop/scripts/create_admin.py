"""
Création du premier compte administrateur (idempotent).

L'inscription publique attribue toujours le rôle USER : ce script est le seul
moyen de créer un ADMIN.

    python -m sweetshop.scripts.create_admin --email admin@example.com
"""

import argparse
import getpass
import logging
import sys
from typing import Optional

from sqlalchemy.orm import Session

from sweetshop.core.config import get_settings
from sweetshop.core.database import create_db_engine, create_session_factory, init_db
from sweetshop.core.errors import ConfigurationError
from sweetshop.core.logging_config import setup_logging
from sweetshop.core.security import configure_password_hashing, get_password_hash
from sweetshop.models.user import Role, User
from sweetshop.repositories.user_repo import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def create_admin(db: Session, email: str, password: str) -> tuple[User, bool]:
    """Retourne (utilisateur, créé). Un compte existant n'est jamais modifié."""
    existing = get_user_by_email(db, email)
    if existing:
        return existing, False

    user = create_user(db, email=email, password_hash=get_password_hash(password), role=Role.ADMIN)
    return user, True


def _prompt_password() -> str:
    password = getpass.getpass("Mot de passe : ")
    if not password:
        raise SystemExit("Le mot de passe est obligatoire.")
    if password != getpass.getpass("Confirmation : "):
        raise SystemExit("Les mots de passe ne correspondent pas.")
    return password


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Créer le premier compte administrateur (idempotent).")
    parser.add_argument("--email", required=True, help="Email du compte")
    parser.add_argument("--password", help="Mot de passe (demandé si omis)")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv)
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        raise SystemExit(str(exc))

    setup_logging(settings.log_level)
    configure_password_hashing(settings.password_hash_rounds)

    email = args.email.strip()
    if not email:
        raise SystemExit("L'email est obligatoire.")
    password = args.password or _prompt_password()

    engine = create_db_engine(settings.database_url)
    init_db(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as db:
        user, created = create_admin(db, email, password)

    if created:
        print(f"Administrateur créé : id={user.id} email={user.email}")
    else:
        print(f"Compte déjà existant : id={user.id} email={user.email} role={user.role}")
    engine.dispose()


if __name__ == "__main__":
    main(sys.argv[1:])
