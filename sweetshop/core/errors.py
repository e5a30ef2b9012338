# ===================================
# sweetshop/core/errors.py
# ===================================
"""
Taxonomie fermée des erreurs métier.

Chaque erreur porte son code HTTP et un message générique destiné au client.
Les services lèvent ces erreurs, la couche HTTP (sweetshop.main) les convertit
en enveloppe JSON {"error": message}.
"""

from fastapi import status


class AppError(Exception):
    """Erreur de base de l'application"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Erreur interne du serveur"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    """Entrée client absente ou mal formée"""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Requête invalide"


class ConflictError(AppError):
    """Violation d'unicité"""
    status_code = status.HTTP_409_CONFLICT
    message = "Ressource déjà existante"


class AuthenticationError(AppError):
    """Identité absente ou invérifiable (en-tête manquant, mal formé, jeton invalide ou expiré)"""
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Non autorisé"


class InvalidCredentialsError(AuthenticationError):
    """Email inconnu ou mot de passe incorrect, sans distinction"""
    message = "Identifiants invalides"


class AuthorizationError(AppError):
    """Identité établie mais rôle insuffisant"""
    status_code = status.HTTP_403_FORBIDDEN
    message = "Accès interdit"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Ressource introuvable"


class InsufficientStockError(AppError):
    """Règle métier : le stock ne peut pas devenir négatif"""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Stock insuffisant"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Erreur interne du serveur"


class ConfigurationError(InternalError):
    """Configuration obligatoire absente (secret de signature, URL de base)"""


class InvalidTokenError(Exception):
    """
    Jeton mal formé, signature invalide, expiré ou secret absent.
    Jamais renvoyé tel quel au client : la porte d'authentification le
    convertit en AuthenticationError.
    """
