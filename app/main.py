import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config.database import init_db
from app.config.settings import settings
from app.core.exceptions import AppError
from app.core.middleware import setup_middleware
from app.core.scheduler import MonthlyTrigger
from app.api.v1.router import api_router
from app.modules.sales.tasks import send_unpaid_commission_report
from app.shared.notifications import EmailService, NotificationQueue

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

SHUTDOWN_DRAIN_TIMEOUT = 10

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"🚀 {settings.app_name} starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"💰 Commission rate: {settings.sales_commission_percentage}")

    init_db()

    queue = NotificationQueue()
    app.state.notification_queue = queue
    mailer = EmailService.from_settings(settings)
    worker = asyncio.create_task(
        queue.consume(
            mailer.send,
            max_attempts=settings.mail_max_attempts,
            retry_delay=settings.mail_retry_delay_seconds
        ),
        name="notification-worker"
    )

    trigger = None
    if settings.scheduler_enabled:
        trigger = MonthlyTrigger(
            lambda: send_unpaid_commission_report(queue),
            day=settings.commission_report_day,
            hour=settings.commission_report_hour,
            name="unpaid-commission-report"
        )
        trigger.start()

    yield

    # Shutdown
    logger.info(f"🛑 {settings.app_name} shutting down...")
    if trigger is not None:
        await trigger.stop()

    queue.close()
    try:
        await asyncio.wait_for(queue.drain(), timeout=SHUTDOWN_DRAIN_TIMEOUT)
    except asyncio.TimeoutError:
        logger.warning(f"Cola de notificaciones no vaciada; {queue.qsize()} correos pendientes")

    worker.cancel()
    try:
        await worker
    except asyncio.CancelledError:
        pass
    logger.info(f"📨 Correos entregados: {queue.delivered}, descartados: {queue.dropped}")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Registro de ventas, cálculo de comisiones y reportes por correo",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)

# Error handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"message": "Datos inválidos", "status": "error", "errors": errors}
    )

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Error no controlado en {request.method} {request.url.path}")
    content = {"message": "Internal Server Error", "status": "error"}
    if settings.debug:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)

# Include routers
app.include_router(api_router)

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": settings.app_name,
        "version": settings.version,
        "status": "running",
        "docs": "/docs" if settings.debug else "Disabled in production"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
