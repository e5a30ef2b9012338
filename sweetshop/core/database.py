# ===================================
# sweetshop/core/database.py
# ===================================
import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Crée le moteur SQLAlchemy et son pool de connexions
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            future=True,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _use_immediate_transactions(engine)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=echo,  # Log des requêtes SQL en mode debug
        future=True,
    )


def _use_immediate_transactions(engine: Engine) -> None:
    """
    SQLite n'a pas de verrou de ligne : chaque transaction prend le verrou
    d'écriture dès BEGIN pour que les écrivains concurrents attendent leur tour.
    Les lectures aussi : liste et recherche attendent derrière une écriture
    en cours. Acceptable pour la base locale et les tests, PostgreSQL n'a
    pas ce hook.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        future=True
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Générateur de session de base de données pour l'injection de dépendance FastAPI
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    """
    Crée les tables si elles n'existent pas encore
    """
    # Import local pour enregistrer les modèles sur Base.metadata
    import sweetshop.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Tables vérifiées")


def check_db_connection(engine: Engine) -> bool:
    """
    Vérifie la connexion à la base de données
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Erreur de connexion DB: %s", e)
        return False
