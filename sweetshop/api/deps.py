# ===================================
# sweetshop/api/deps.py
# ===================================
from dataclasses import dataclass
from typing import Iterable, Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from sweetshop.core.database import get_db
from sweetshop.core.errors import AuthenticationError, AuthorizationError, InvalidTokenError
from sweetshop.core.security import TokenService
from sweetshop.models.user import Role
from sweetshop.services.auth_service import AuthService
from sweetshop.services.sweet_service import SweetService


@dataclass(frozen=True)
class Principal:
    """Identité authentifiée attachée à une requête"""
    user_id: int
    role: Role


@dataclass(frozen=True)
class RequestContext:
    """
    Contexte par requête produit par la porte d'authentification.
    principal vaut None si le jeton est valide mais porte un rôle inconnu.
    """
    principal: Optional[Principal] = None


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def authenticate(
    request: Request,
    token_service: TokenService = Depends(get_token_service)
) -> RequestContext:
    """
    Porte d'authentification : exige exactement « Bearer <token> ».
    Toute anomalie donne la même réponse 401, sans détail.
    """
    header = request.headers.get("Authorization")
    if not header:
        raise AuthenticationError()

    parts = header.split()
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthenticationError()

    try:
        payload = token_service.verify(parts[1])
    except InvalidTokenError:
        raise AuthenticationError()

    role = Role.parse(payload.role)
    if role is None:
        return RequestContext()
    return RequestContext(principal=Principal(user_id=payload.user_id, role=role))


def authorize(context: Optional[RequestContext], allowed_roles: Iterable[Role]) -> Principal:
    """
    Porte d'autorisation : le rôle du principal doit appartenir à l'ensemble
    autorisé. Sans contexte ni principal, l'accès est refusé (403).
    """
    principal = context.principal if context is not None else None
    if principal is None or Role.parse(principal.role) is None:
        raise AuthorizationError()

    if principal.role not in set(allowed_roles):
        raise AuthorizationError()
    return principal


def require_roles(*allowed_roles: Role):
    """Dépendance vérifiant les rôles autorisés d'une route"""
    def role_checker(context: RequestContext = Depends(authenticate)) -> Principal:
        return authorize(context, allowed_roles)

    return role_checker


require_admin = require_roles(Role.ADMIN)
require_any_role = require_roles(Role.ADMIN, Role.USER)


def get_auth_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> AuthService:
    return AuthService(db, token_service)


def get_sweet_service(db: Session = Depends(get_db)) -> SweetService:
    return SweetService(db)
