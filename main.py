"""
UltraCare Backend - FastAPI Application Entry Point

Elder-monitoring backend: device registry, resident roster, fall/offline
alerts, household-admin subscriptions and push notifications.
"""

from contextlib import asynccontextmanager
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from admin.admin import setup_admin
from api.routes import (
    admin_stats,
    alerts,
    app_alerts,
    app_devices,
    auth,
    devices,
    health,
    household_admins,
    push,
    residents,
    subscription,
    upload,
)
from core.config import settings
from core.context import ServiceContext
from core.exceptions import AppError
from core.logging import log_request_middleware, setup_logging

# Setup logging
logger = setup_logging(settings)


def _client_host(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"App Error: {exc.message} | Path: {request.url.path} | Method: {request.method}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation exceptions."""
    errors = exc.errors()
    logger.warning(
        f"Validation Exception: {errors} | "
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Client: {_client_host(request)}"
    )
    user_message = errors[0].get("msg", "Invalid input data") if errors else "Invalid input data"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"ok": False, "error": user_message},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(
        f"HTTP Exception: {exc.detail} | "
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Client: {_client_host(request)}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Server Exception: {exc!r} | "
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Client: {_client_host(request)}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"ok": False, "error": "Internal server error"},
    )


def create_app(context: Optional[ServiceContext] = None) -> FastAPI:
    """Build the application around ``context`` (built from settings when omitted)."""
    context = context or ServiceContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {context.settings.APP_NAME}...")
        await context.startup()
        yield
        logger.info(f"Shutting down {context.settings.APP_NAME}...")
        await context.shutdown()

    app = FastAPI(
        title=f"{context.settings.APP_NAME} API",
        description="Elder-monitoring backend for fall detection devices and household admins",
        version=context.settings.VERSION,
        docs_url="/docs" if context.settings.DEBUG else None,
        redoc_url="/redoc" if context.settings.DEBUG else None,
        openapi_url="/openapi.json" if context.settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if context.settings.ENABLE_REQUEST_LOGGING:
        app.middleware("http")(log_request_middleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Include API routers
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(subscription.router, prefix="/api/subscription", tags=["Subscription"])
    app.include_router(devices.heartbeat_router, prefix="/api", tags=["Devices"])
    app.include_router(devices.router, prefix="/api/devices", tags=["Devices"])
    app.include_router(app_devices.router, prefix="/api/app/devices", tags=["App Devices"])
    app.include_router(residents.router, prefix="/api/residents", tags=["Residents"])
    app.include_router(alerts.events_router, prefix="/api", tags=["Alerts"])
    app.include_router(alerts.router, prefix="/api/alerts", tags=["Alerts"])
    app.include_router(app_alerts.router, prefix="/api/app/alerts", tags=["App Alerts"])
    app.include_router(admin_stats.router, prefix="/api/admin", tags=["Admin"])
    app.include_router(household_admins.router, prefix="/api/household-admins", tags=["Household Admins"])
    app.include_router(push.router, prefix="/api/push", tags=["Push"])
    app.include_router(upload.router, prefix="/api/upload", tags=["Upload"])

    setup_admin(app, context.engine, context.settings)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
