import logging
from typing import Optional, Dict, Any, Union

import stripe

from .base import PaymentProcessor

logger = logging.getLogger(__name__)


class StripeProcessor(PaymentProcessor):
    """
    Stripe PaymentIntents via stripe-python. The API key is passed on every
    request rather than set on the global ``stripe.api_key``, so several
    processors with different keys can live in one process.
    """

    def __init__(self, api_key: str):
        if not api_key:
            raise ValueError("A Stripe secret key is required to build StripeProcessor")
        self._api_key = api_key

    def create(
        self,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        description: Optional[str] = None,
    ) -> Any:
        params: Dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "metadata": metadata,
        }
        if description:
            params["description"] = description
        pi = stripe.PaymentIntent.create(api_key=self._api_key, **params)
        logger.info(f"Created Stripe payment intent {pi.id}")
        return pi

    def retrieve(self, payment_intent_id: str) -> Any:
        return stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self._api_key)

    def cancel(self, payment_intent_id: str) -> Any:
        pi = stripe.PaymentIntent.cancel(payment_intent_id, api_key=self._api_key)
        logger.info(f"Canceled Stripe payment intent {payment_intent_id}")
        return pi

    def construct_event(
        self, payload: Union[str, bytes], signature: str, secret: str
    ) -> Any:
        return stripe.Webhook.construct_event(
            payload=payload, sig_header=signature, secret=secret, api_key=self._api_key
        )
