"""Canonicalization of verified Stripe webhook payloads."""

import json
import logging
from typing import Union, Dict, Any

from .models import WebhookEvent, INVOICE_ID_KEY, CLIENT_ACCOUNT_ID_KEY

logger = logging.getLogger(__name__)

PAYMENT_INTENT_EVENT_PREFIX = "payment_intent."


def parse_webhook_event(payload: Union[str, bytes]) -> WebhookEvent:
    """Parse a webhook body into a WebhookEvent.

    Call this only after the signature has been validated.

    Args:
        payload: Raw request body.

    Returns:
        The canonical event. For event types other than ``payment_intent.*``
        only ``id``, ``type`` and ``livemode`` are filled in.

    Raises:
        ValueError: If the body is not a JSON object or a payment intent
            carries metadata that is not an object.
    """
    try:
        body = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValueError("Invalid webhook payload")
    if not isinstance(body, dict):
        raise ValueError("Webhook payload must be a JSON object")

    event_type = str(body.get("type") or "unknown")
    event = WebhookEvent(
        id=body.get("id"),
        type=event_type,
        livemode=bool(body.get("livemode", False)),
    )
    if not event_type.startswith(PAYMENT_INTENT_EVENT_PREFIX):
        return event

    data = body.get("data")
    obj = data.get("object") if isinstance(data, dict) else None
    if not isinstance(obj, dict):
        obj = {}
    metadata: Dict[str, Any] = obj.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise ValueError("Invalid webhook payload")
    event.payment_intent_id = obj.get("id")
    event.invoice_id = metadata.get(INVOICE_ID_KEY)
    event.client_account_id = metadata.get(CLIENT_ACCOUNT_ID_KEY)
    event.amount = obj.get("amount")
    event.currency = obj.get("currency")
    event.status = obj.get("status")
    logger.info(f"Parsed webhook {event.type} for payment intent {event.payment_intent_id}")
    return event
