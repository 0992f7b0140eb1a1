"""
Stripe Payment Service

This module handles all Stripe-related payment operations including:
- Creating payment intents
- Verifying and decoding webhook events
"""

from typing import Any, Protocol

import stripe
import structlog
from starlette.concurrency import run_in_threadpool

from core.logging import BusinessEvents
from core.settings import Settings

log = structlog.get_logger(__name__)


class PaymentGatewayError(Exception):
    pass


class WebhookVerificationError(Exception):
    pass


class PaymentGateway(Protocol):
    async def create_intent(self, amount: int, currency: str) -> dict[str, Any]: ...

    def construct_event(self, payload: bytes, signature: str | None) -> Any: ...


class StripeGateway:
    def __init__(self, settings: Settings):
        stripe.api_key = settings.STRIPE_SECRET_KEY
        if settings.STRIPE_API_VERSION:
            stripe.api_version = settings.STRIPE_API_VERSION
        stripe.set_app_info(
            settings.APP_NAME, version=settings.APP_VERSION, url=settings.APP_URL
        )
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET

    async def create_intent(self, amount: int, currency: str) -> dict[str, Any]:
        """
        Create a Stripe PaymentIntent.

        Args:
            amount: Amount in the currency's smallest unit
            currency: ISO currency code

        Returns:
            Dict containing client_secret and payment_intent_id
        """
        log.info(
            BusinessEvents.PAYMENT_ATTEMPT,
            amount=amount,
            currency=currency,
            provider="stripe",
        )

        def _create_intent_sync():
            return stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                automatic_payment_methods={"enabled": True},
            )

        try:
            intent = await run_in_threadpool(_create_intent_sync)
        except stripe.StripeError as e:
            message = e.user_message or str(e)
            log.error(
                BusinessEvents.PAYMENT_FAILURE,
                amount=amount,
                currency=currency,
                provider="stripe",
                error=message,
            )
            raise PaymentGatewayError(message) from e

        log.info(
            BusinessEvents.PAYMENT_SUCCESS,
            amount=amount,
            currency=currency,
            provider="stripe",
            provider_transaction_id=intent.id,
        )
        return {
            "client_secret": intent.client_secret,
            "payment_intent_id": intent.id,
        }

    def construct_event(self, payload: bytes, signature: str | None) -> stripe.Event:
        """Verify the Stripe-Signature header against the raw body and decode it."""
        if not signature:
            raise WebhookVerificationError("signature missing")
        try:
            return stripe.Webhook.construct_event(
                payload, signature, self.webhook_secret
            )
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError("invalid signature") from e
        except ValueError as e:
            raise WebhookVerificationError(f"invalid payload: {e}") from e
