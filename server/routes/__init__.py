"""Router aggregation for the form relay service."""

from __future__ import annotations

from fastapi import APIRouter

from app.routers import forms as forms_router_module
from app.routers import health as health_router_module
from app.routers import messaging as messaging_router_module
from app.routers import orders as orders_router_module

# Routes stay at the root; website forms already post to these paths
api_router = APIRouter()

api_router.include_router(health_router_module.router)
api_router.include_router(forms_router_module.router)
api_router.include_router(orders_router_module.router)
api_router.include_router(messaging_router_module.router)

__all__ = ["api_router"]
