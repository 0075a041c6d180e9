import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config.settings import settings

logger = logging.getLogger(__name__)

# Rutas de sondeo: se registran solo en DEBUG
QUIET_PATHS = {"/health", "/"}

def setup_middleware(app: FastAPI):
    """Configurar CORS y el log de acceso HTTP"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=3600
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        elif request.url.path in QUIET_PATHS:
            level = logging.DEBUG
        else:
            level = logging.INFO

        logger.log(
            level,
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - {elapsed_ms:.1f}ms"
        )
        return response
