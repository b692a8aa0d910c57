"""
API Routers
"""
from .estimates import router as estimates_router
from .health import router as health_router

__all__ = ["estimates_router", "health_router"]
