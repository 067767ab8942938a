"""Main FastAPI application for the form relay service."""

from __future__ import annotations

import json

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .logging_config import configure_logging, logger
from .routes import api_router

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]
CORS_HEADERS = [
    "Content-Type",
    "Authorization",
    "X-Requested-With",
    "Accept",
    "Origin",
    "Access-Control-Request-Method",
    "Access-Control-Request-Headers",
]


# Register global exception handlers for consistent error responses across the API
def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers for 422, HTTP, and 500 errors."""

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.debug("validation error", extra={"errors": exc.errors(), "path": str(request.url)})
        return JSONResponse(
            {"success": False, "message": "Invalid request", "detail": jsonable_encoder(exc.errors())},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException):
        logger.debug(
            "http error",
            extra={"detail": exc.detail, "status": exc.status_code, "path": str(request.url)},
        )
        detail = exc.detail
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        return JSONResponse({"success": False, "message": detail}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": str(request.url)})
        return JSONResponse(
            {"success": False, "message": "Internal server error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


# Configure logging early
configure_logging()
_settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title=_settings.app_name,
    version=_settings.app_version,
    docs_url=_settings.resolved_docs_url,
    redoc_url=None,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=CORS_METHODS,
    allow_headers=CORS_HEADERS,
    expose_headers=["Content-Length", "Content-Type"],
    max_age=86400,
)

# Register exception handlers
register_exception_handlers(app)

# Include aggregated router
app.include_router(api_router)


@app.on_event("startup")
async def _startup() -> None:
    """Initialize services when the app starts."""
    settings = get_settings()
    logger.info("Starting form relay server", extra={"version": settings.app_version})
    logger.info(f"CORS configuration: allowing origins {settings.cors_allow_origins}")

    if not settings.captcha_enabled:
        logger.warning("RECAPTCHA_SECRET_KEY is not set; form submissions are not CAPTCHA-checked")

    if settings.whatsapp_autostart:
        from app.services.whatsapp_session import get_whatsapp_session

        await get_whatsapp_session().start()
        logger.info(
            "WhatsApp session monitor started",
            extra={"bridge": settings.whatsapp_bridge_url, "session": settings.whatsapp_session},
        )
    else:
        logger.info("WhatsApp autostart disabled; waiting for bridge webhooks")

    logger.info(f"Contact form endpoint: POST /dm-tors/contactform on port {settings.server_port}")
    logger.info("Form relay server started successfully")


@app.on_event("shutdown")
async def _shutdown() -> None:
    """Gracefully shutdown services when the app stops."""
    logger.info("Shutting down form relay server")

    from app.services.whatsapp_session import get_whatsapp_session

    await get_whatsapp_session().close()
    logger.info("Form relay server shutdown complete")


__all__ = ["app"]
