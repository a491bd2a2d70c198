"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftpay import __version__
from shiftpay.api.routes import health_router, shifts_router, tax_router
from shiftpay.calculators.break_calculator import BreakValidationError
from shiftpay.calculators.tax_tables import TaxConfigurationError
from shiftpay.calculators.validation import PayGuideValidationError, ShiftValidationError

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Shift Pay API",
        description="Shift pay and PAYG withholding calculations",
        version=__version__,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(BreakValidationError)
    @app.exception_handler(ShiftValidationError)
    @app.exception_handler(PayGuideValidationError)
    async def validation_exception_handler(
        request: Request, exc: ValueError
    ) -> JSONResponse:
        """Reject shifts, breaks and pay guides the calculator cannot price."""
        context = None
        if isinstance(exc, PayGuideValidationError):
            context = {"field": exc.field_name}
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": str(exc),
                "code": "VALIDATION_ERROR",
                "context": context,
            },
        )

    @app.exception_handler(TaxConfigurationError)
    async def tax_configuration_exception_handler(
        request: Request, exc: TaxConfigurationError
    ) -> JSONResponse:
        """Missing or incomplete withholding tables."""
        logger.error("Tax configuration error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": str(exc),
                "code": "TAX_CONFIGURATION_ERROR",
                "context": {
                    "scale": exc.scale,
                    "earnings": str(exc.earnings) if exc.earnings is not None else None,
                },
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(shifts_router, prefix="/api/v1")
    app.include_router(tax_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
