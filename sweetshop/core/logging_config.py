# ===================================
# sweetshop/core/logging_config.py
# ===================================
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configurer les logs de l'application"""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("sweetshop").setLevel(level)
    # Les requêtes SQL ne sont loguées qu'en mode debug via echo=True
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
