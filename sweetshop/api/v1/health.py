# ===================================
# sweetshop/api/v1/health.py
# ===================================
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from sweetshop.core.database import check_db_connection

router = APIRouter()


@router.get("/ping")
def ping():
    """Vérification de vie, sans accès à la base"""
    return {"pong": True}


@router.get("/health")
def health_check(request: Request):
    """Vérification de la santé de l'API"""
    settings = request.app.state.settings
    db_ok = check_db_connection(request.app.state.engine)

    return JSONResponse(
        status_code=status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if db_ok else "error",
            "version": settings.app_version,
            "environment": settings.environment,
            "database": "ok" if db_ok else "error",
        },
    )
