"""
Genesis Checkout - Main Application Entry Point

This module initializes the FastAPI application: the static checkout page,
contract-priced Stripe PaymentIntents and the Stripe webhook receiver.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from api import routes, schemas, webhooks
from api.middleware import log_api_entry
from core.dependencies import clear_settings, get_settings, init_settings
from core.logging import configure_logging
from core.metrics import add_metrics_toggle_middleware, init_metrics
from core.settings import Settings
from core.tracing import init_tracer

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application startup and shutdown events."""
    # Startup
    init_settings()
    settings = get_settings()
    init_tracer(settings)
    log.info(
        "app.startup",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        network=settings.ETH_NETWORK,
    )

    yield
    # Shutdown
    clear_settings()


app = FastAPI(
    title="Genesis Checkout",
    description="Checkout backend pricing sales from an on-chain contract and collecting payment through Stripe.",
    version="1.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

FastAPIInstrumentor.instrument_app(app)

init_metrics(app)

add_metrics_toggle_middleware(app)

app.middleware("http")(log_api_entry)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error("api.unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
    )


@app.get("/healthz", response_model=schemas.HealthOut)
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint to verify API status."""
    return {
        "status": "ok",
        "app_name": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }


app.include_router(routes.router, tags=["checkout"])
app.include_router(webhooks.router, tags=["webhooks"])


def main():
    import uvicorn

    configure_logging()
    settings = Settings()
    log.info("server.listening", host=settings.HOST, port=settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
