from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from server.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/")
async def root(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "message": settings.app_name,
        "endpoints": {
            "contactForm": "POST /dm-tors/contactform",
            "lead": "POST /dm-tors/lead",
            "placeOrder": "POST /juiceBar/placeOrder",
            "orderComplete": "POST /juiceBar/orderComplete",
            "sendWhatsAppMessage": "POST /sendWhatsAppMessage",
            "whatsappStatus": "GET /whatsapp-status",
            "health": "GET /health",
        },
    }


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    """Return service health status for monitoring and load balancers."""
    return {
        "status": "OK",
        "message": "Server is running",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/healthz")
async def healthz() -> dict:
    """Alternative health endpoint (kept for compatibility)."""
    return {"status": "ok"}
