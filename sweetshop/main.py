# ===================================
# sweetshop/main.py
# ===================================
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import logging

from sweetshop.core.config import Settings, get_settings
from sweetshop.core.database import (
    create_db_engine,
    create_session_factory,
    init_db,
    check_db_connection,
)
from sweetshop.core.errors import AppError, AuthenticationError, InternalError, ValidationError
from sweetshop.core.logging_config import setup_logging
from sweetshop.core.security import TokenService, configure_password_hashing

# Import des routes
from sweetshop.api.v1 import auth, sweets, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestionnaire de cycle de vie de l'application"""
    logger.info("Démarrage de %s...", app.state.settings.app_name)

    # Vérifier la connexion DB
    if not check_db_connection(app.state.engine):
        raise InternalError("Impossible de se connecter à la base de données")

    init_db(app.state.engine)
    logger.info("Application démarrée")

    yield

    logger.info("Arrêt de l'application...")
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Factory pour créer l'application FastAPI.

    Initialisation explicite et ordonnée : settings (échec immédiat si
    DATABASE_URL ou JWT_SECRET_KEY manquent), logs, coût bcrypt, moteur DB,
    service de jetons, puis routes.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings.log_level)
    configure_password_hashing(settings.password_hash_rounds)

    engine = create_db_engine(settings.database_url, echo=settings.debug)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_service = TokenService(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_access_token_expire_minutes,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes API
    app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])
    app.include_router(sweets.router, prefix=f"{settings.api_prefix}/sweets", tags=["Sweets"])
    app.include_router(health.router, tags=["Health"])

    register_exception_handlers(app)
    return app


def _error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Gestion globale des erreurs : enveloppe {"error": message}"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, InternalError):
            logger.error("Erreur interne: %s", exc, exc_info=True)
            return _error_response(exc.status_code, InternalError.message)

        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return _error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(ValidationError.status_code, ValidationError.message)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error("Erreur non gérée: %s", exc, exc_info=True)
        return _error_response(InternalError.status_code, InternalError.message)


def get_app() -> FastAPI:
    """Point d'entrée uvicorn (--factory)"""
    return create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sweetshop.main:get_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
