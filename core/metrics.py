"""
Prometheus metrics instrumentation for the checkout backend.

Exposes request metrics plus a few checkout counters at /metrics.
"""

import os

from fastapi import Request, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

payment_intents_total = Counter(
    "checkout_payment_intents_total",
    "Payment intents requested from the processor",
    ["kind", "outcome"],  # kind: priced | test, outcome: created | failed
)

price_lookups_total = Counter(
    "checkout_price_lookups_total",
    "Contract price lookups converted to fiat",
    ["outcome"],  # quoted | unavailable | contract_error
)

webhook_events_total = Counter(
    "checkout_webhook_events_total",
    "Webhook deliveries received from the processor",
    ["event_type", "outcome"],
)


def init_metrics(app):
    """
    Initialize Prometheus metrics instrumentation for the FastAPI app.

    Args:
        app: FastAPI application instance

    Returns:
        Instrumentator instance
    """
    inst = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        excluded_handlers=["/metrics"],
    )
    inst.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    return inst


def metrics_enabled() -> bool:
    """METRICS_ENABLED from the environment, defaulting to on."""
    return os.getenv("METRICS_ENABLED", "true").lower() in {"1", "true", "yes"}


def add_metrics_toggle_middleware(app):
    """Hide the /metrics endpoint when METRICS_ENABLED is off."""

    @app.middleware("http")
    async def metrics_toggle_middleware(request: Request, call_next):
        if request.url.path == "/metrics" and not metrics_enabled():
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"detail": "Not Found"},
            )
        return await call_next(request)
