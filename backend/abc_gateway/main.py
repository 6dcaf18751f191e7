"""
ABC Payment Gateway - FastAPI Application

Protocol adapter between merchant apps and the Agricultural Bank of China
aggregated payment platform: QR code, e-wallet and WeChat in-app payments
plus order status queries.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging
import time

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .api.payments import router as payments_router
from .config import Settings, settings
from .exceptions import GatewayError
from .mocks.bank_platform import create_mock_transport
from .services import build_gateway
from .services.callbacks import CallbackVerifier, InsecureCallbackVerifier
from .services.signer import SigningTransform
from .services.transport import create_http_client

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings = settings,
    transform: Optional[SigningTransform] = None,
    callback_verifier: Optional[CallbackVerifier] = None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: Loaded settings
        transform: Bank signing transform; None leaves requests unsigned
            (only allowed in insecure mode)
        callback_verifier: Notification verifier; defaults to the
            insecure-mode placeholder
        http_transport: Override for the outbound httpx transport
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup: build the shared HTTP client and the payment gateway.
        Shutdown: close the client's connection pool.
        """
        logger.info("Starting ABC payment gateway...")
        logger.info(f"Environment: {app_settings.environment}")

        outbound = http_transport
        if outbound is None and app_settings.sandbox_mode:
            logger.warning("Sandbox mode: bank requests are answered by the in-process mock")
            outbound = create_mock_transport()
        if app_settings.insecure_mode:
            logger.warning("Insecure mode enabled: unsigned requests and default secrets are allowed")
        if not app_settings.merchant_ids:
            logger.warning("No merchant ids configured")

        client = create_http_client(app_settings.request_timeout_seconds, transport=outbound)
        app.state.started_at = time.monotonic()
        app.state.gateway = build_gateway(app_settings, client, transform=transform)
        app.state.callback_verifier = callback_verifier or InsecureCallbackVerifier(app_settings.insecure_mode)

        logger.info("Server startup complete")

        yield

        logger.info("Shutting down ABC payment gateway...")
        await client.aclose()

    app = FastAPI(
        title="ABC Payment Gateway API",
        description="Agricultural Bank of China aggregated payment adapter",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """Gateway errors escaping a route become 400 with the error body."""
        logger.warning(f"Gateway error: {exc.error_code} - {exc.message}", extra={"details": exc.details})
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        """
        Catch-all handler for unexpected errors.

        Logs full exception for debugging but returns generic message to client.
        """
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "internal_error",
                "message": "An unexpected error occurred",
                "details": {}
            }
        )

    @app.get("/")
    async def root():
        return {
            "name": "ABC Payment Gateway API",
            "version": VERSION,
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": app_settings.environment,
        }

    @app.get("/health")
    async def health_check(request: Request):
        """
        Health check endpoint for monitoring and load balancers.

        Returns:
            Server status and uptime in seconds
        """
        started_at = getattr(request.app.state, "started_at", time.monotonic())
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": int(time.monotonic() - started_at),
        }

    @app.get("/ping", response_class=PlainTextResponse)
    async def ping():
        return "pong"

    app.include_router(payments_router, prefix="/api/payment", tags=["Payment"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "abc_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
