"""
Stripe webhook endpoint tests.

Payloads are signed locally with the webhook secret, so verification runs
through the real Stripe SDK.
"""

from unittest.mock import patch

import pytest

from conftest import event_payload, sign_payload

BRANCH_EVENTS = {"webhook.payment_captured", "webhook.payment_failed"}


def _logged_events(mock_log):
    return [c.args[0] for c in mock_log.info.call_args_list]


def _post(client, payload, signature=None):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["Stripe-Signature"] = signature
    return client.post("/webhook", content=payload, headers=headers)


def test_payment_succeeded_event(client):
    payload = event_payload("payment_intent.succeeded")

    with patch("api.webhooks.log") as mock_log:
        response = _post(client, payload, sign_payload(payload))

    assert response.status_code == 200
    assert response.content == b""
    assert _logged_events(mock_log) == ["webhook.payment_captured"]
    kwargs = mock_log.info.call_args.kwargs
    assert kwargs["payment_intent_id"] == "pi_test_123"
    assert kwargs["status"] == "succeeded"
    assert kwargs["object"] == "payment_intent"


def test_payment_failed_event(client):
    payload = event_payload(
        "payment_intent.payment_failed", status="requires_payment_method"
    )

    with patch("api.webhooks.log") as mock_log:
        response = _post(client, payload, sign_payload(payload))

    assert response.status_code == 200
    assert _logged_events(mock_log) == ["webhook.payment_failed"]
    assert mock_log.info.call_args.kwargs["status"] == "requires_payment_method"


def test_other_event_types_acknowledged(client):
    payload = event_payload("payment_intent.created", status="requires_payment_method")

    with patch("api.webhooks.log") as mock_log:
        response = _post(client, payload, sign_payload(payload))

    assert response.status_code == 200
    assert _logged_events(mock_log) == ["webhook.ignored"]


@pytest.mark.parametrize(
    "signature",
    [
        None,
        "",
        "t=1,v1=deadbeef",
        "garbage",
    ],
)
def test_bad_signature_rejected(client, signature):
    payload = event_payload("payment_intent.succeeded")

    with patch("api.webhooks.log") as mock_log:
        response = _post(client, payload, signature)

    assert response.status_code == 400
    assert response.content == b""
    mock_log.warning.assert_called_once()
    assert mock_log.warning.call_args.args[0] == "webhook.rejected"
    assert not BRANCH_EVENTS & set(_logged_events(mock_log))


def test_signature_from_other_secret_rejected(client):
    payload = event_payload("payment_intent.succeeded")

    with patch("api.webhooks.log") as mock_log:
        response = _post(client, payload, sign_payload(payload, secret="whsec_other"))

    assert response.status_code == 400
    assert _logged_events(mock_log) == []


def test_tampered_body_rejected(client):
    payload = event_payload("payment_intent.succeeded")
    signature = sign_payload(payload)

    with patch("api.webhooks.log") as mock_log:
        response = _post(client, payload.replace(b"succeeded", b"canceled"), signature)

    assert response.status_code == 400
    assert _logged_events(mock_log) == []


def test_webhook_rejects_get(client):
    response = client.get("/webhook")
    assert response.status_code == 405
