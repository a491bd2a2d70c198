"""API routes."""

from shiftpay.api.routes.health import router as health_router
from shiftpay.api.routes.shifts import router as shifts_router
from shiftpay.api.routes.tax import router as tax_router

__all__ = ["health_router", "shifts_router", "tax_router"]
