"""
API Routes Module

This module defines the checkout routes:
- Static checkout page
- Publishable configuration
- Payment intent creation (priced and fixed test amount)
"""

from pathlib import Path

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse, JSONResponse

from api import schemas
from core.dependencies import get_payment_gateway, get_price_pipeline, get_settings
from core.logging import BusinessEvents
from core.metrics import payment_intents_total, price_lookups_total
from core.settings import Settings
from payments.stripe_service import PaymentGateway, PaymentGatewayError
from pricing.contract import ContractReadError
from pricing.pipeline import PricePipeline, to_major_units, to_minor_units

log = structlog.get_logger(__name__)

router = APIRouter()

CURRENCY = "eur"
TEST_INTENT_AMOUNT = 100


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=schemas.ErrorOut(error={"message": message}).model_dump(),
    )


async def _create_intent(
    gateway: PaymentGateway, amount: int, display_amount: int, kind: str
):
    try:
        intent = await gateway.create_intent(amount, CURRENCY)
    except PaymentGatewayError as e:
        payment_intents_total.labels(kind=kind, outcome="failed").inc()
        return _error(status.HTTP_400_BAD_REQUEST, str(e))

    payment_intents_total.labels(kind=kind, outcome="created").inc()
    return schemas.IntentOut(
        client_secret=intent["client_secret"], amount=display_amount
    )


@router.get("/", include_in_schema=False)
async def checkout_page(settings: Settings = Depends(get_settings)):
    """Serve the checkout page."""
    index_path = Path(settings.STATIC_DIR).resolve() / "index.html"
    if not index_path.is_file():
        raise HTTPException(status_code=404, detail="Checkout page not found")
    return FileResponse(index_path)


@router.get("/config", response_model=schemas.PublicConfig)
async def public_config(settings: Settings = Depends(get_settings)):
    """Publishable key for Stripe.js; never the secret key."""
    return schemas.PublicConfig(publishable_key=settings.STRIPE_PUBLISHABLE_KEY)


@router.get(
    "/create-payment-intent",
    response_model=schemas.IntentOut,
    responses={
        400: {"model": schemas.ErrorOut},
        502: {"model": schemas.ErrorOut},
        503: {"model": schemas.ErrorOut},
    },
)
async def create_payment_intent(
    pipeline: PricePipeline = Depends(get_price_pipeline),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Price the sale from the contract and open a PaymentIntent for it."""
    try:
        quote = await pipeline.current_price()
    except ContractReadError as e:
        price_lookups_total.labels(outcome="contract_error").inc()
        return _error(status.HTTP_502_BAD_GATEWAY, f"Unable to read price: {e}")

    if quote is None or quote.fiat_amount <= 0:
        price_lookups_total.labels(outcome="unavailable").inc()
        log.warning(BusinessEvents.PRICE_UNAVAILABLE, route="create-payment-intent")
        return _error(
            status.HTTP_503_SERVICE_UNAVAILABLE, "Unable to fetch EUR price"
        )

    price_lookups_total.labels(outcome="quoted").inc()
    return await _create_intent(
        gateway,
        amount=to_minor_units(quote.fiat_amount),
        display_amount=to_major_units(quote.fiat_amount),
        kind="priced",
    )


@router.get(
    "/create-test-intent",
    response_model=schemas.IntentOut,
    responses={400: {"model": schemas.ErrorOut}},
)
async def create_test_intent(gateway: PaymentGateway = Depends(get_payment_gateway)):
    """PaymentIntent for a fixed 1 EUR, independent of the contract price."""
    return await _create_intent(
        gateway,
        amount=TEST_INTENT_AMOUNT,
        display_amount=TEST_INTENT_AMOUNT // 100,
        kind="test",
    )
