"""
Webhook handler for Stripe events
"""

import structlog
from fastapi import APIRouter, Depends, Request, Response, status

from core.dependencies import get_payment_gateway
from core.logging import BusinessEvents
from core.metrics import webhook_events_total
from payments.stripe_service import PaymentGateway, WebhookVerificationError

log = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/webhook", status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request, gateway: PaymentGateway = Depends(get_payment_gateway)
):
    # Signature is computed over the raw body, so it is read unparsed
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        event = gateway.construct_event(payload, signature)
    except WebhookVerificationError as e:
        webhook_events_total.labels(event_type="unknown", outcome="rejected").inc()
        log.warning(BusinessEvents.WEBHOOK_REJECTED, reason=str(e))
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    event_type = event.type
    payment_intent = event.data.object

    if event_type == "payment_intent.succeeded":
        # Funds have been captured
        log.info(
            BusinessEvents.WEBHOOK_PAYMENT_CAPTURED,
            event_id=event.id,
            object=payment_intent.object,
            payment_intent_id=payment_intent.id,
            status=payment_intent.status,
        )
    elif event_type == "payment_intent.payment_failed":
        log.info(
            BusinessEvents.WEBHOOK_PAYMENT_FAILED,
            event_id=event.id,
            object=payment_intent.object,
            payment_intent_id=payment_intent.id,
            status=payment_intent.status,
        )
    else:
        log.info(BusinessEvents.WEBHOOK_IGNORED, event_id=event.id, type=event_type)

    webhook_events_total.labels(event_type=event_type, outcome="handled").inc()
    return Response(status_code=status.HTTP_200_OK)
