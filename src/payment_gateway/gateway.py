"""Payment-intent lifecycle against Stripe, with a mock mode when unconfigured."""

import time
import logging
import threading
from typing import Any, Optional, Union

from .config import GatewayConfig
from .models import PaymentIntentRequest, PaymentIntentResult, PaymentIntentStatus
from .processors.base import PaymentProcessor
from .processors.stripe_processor import StripeProcessor

logger = logging.getLogger(__name__)

MOCK_ID_PREFIX = "pi_mock_"
MOCK_SECRET_PREFIX = "pi_mock_secret_"


class _MockClock:
    """Hands out strictly increasing millisecond timestamps for mock ids."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last = 0

    def next_millis(self) -> int:
        with self._lock:
            now = int(time.time() * 1000)
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now


# Process-wide so ids stay unique across gateway instances
_mock_clock = _MockClock()


def is_mock_payment_intent_id(payment_intent_id: str) -> bool:
    """True if the id was synthesized by mock mode."""
    return payment_intent_id.startswith(MOCK_ID_PREFIX)


class PaymentGateway:
    """
    Owns the lifecycle of a payment intent: create, retrieve, cancel, verify
    status and validate inbound webhook signatures.

    The mode is fixed at construction. Without a secret key the gateway runs
    in mock mode for its whole lifetime: creation synthesizes ids locally and
    nothing is sent to Stripe. In live mode every call goes to the processor
    and processor errors propagate to the caller unchanged; there are no
    retries and no idempotency keys, so retrying a timed-out create may
    produce a duplicate intent.
    """

    def __init__(self, config: Optional[GatewayConfig] = None):
        config = config or GatewayConfig()
        self._secret_key = config.secret_key
        self._webhook_secret = config.webhook_secret
        self._processor: Optional[PaymentProcessor] = None
        if self._secret_key:
            self._processor = config.processor or StripeProcessor(self._secret_key)

        if self.is_configured():
            logger.info("PaymentGateway running in live mode")
        else:
            logger.info("PaymentGateway running in mock mode: no Stripe secret key configured")
        if not self.signature_enforced:
            logger.warning(
                "Webhook signatures are NOT verified (no webhook secret or mock mode); "
                "do not accept webhooks from untrusted networks"
            )

    def is_configured(self) -> bool:
        return bool(self._secret_key) and self._processor is not None

    @property
    def mock_mode(self) -> bool:
        return not self.is_configured()

    @property
    def signature_enforced(self) -> bool:
        return self.is_configured() and bool(self._webhook_secret)

    def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResult:
        """Create a payment intent.

        Args:
            request: Amount, currency and metadata for the new intent.

        Returns:
            The intent id and the client secret to hand to the paying client.
            The secret is an empty string if Stripe omitted it.
        """
        if self.mock_mode:
            stamp = _mock_clock.next_millis()
            return PaymentIntentResult(
                id=f"{MOCK_ID_PREFIX}{stamp}",
                client_secret=f"{MOCK_SECRET_PREFIX}{stamp}",
            )

        pi = self._processor.create(
            amount=request.amount,
            currency=request.currency,
            metadata=request.processor_metadata(),
            description=request.description,
        )
        return PaymentIntentResult(id=pi.id, client_secret=pi.client_secret or "")

    def verify_payment(self, payment_intent_id: str) -> str:
        """Return the status of a payment intent.

        In mock mode this is a heuristic and not authoritative: mock ids report
        ``succeeded`` and anything else reports ``pending``. In live mode the
        processor's status string is returned verbatim.
        """
        if self.mock_mode:
            if is_mock_payment_intent_id(payment_intent_id):
                return PaymentIntentStatus.SUCCEEDED.value
            return PaymentIntentStatus.PENDING.value

        pi = self._processor.retrieve(payment_intent_id)
        return pi.status

    def get_payment_intent(self, payment_intent_id: str) -> Optional[Any]:
        # Mock mode keeps no store, so even ids it issued are never found
        if self.mock_mode:
            return None
        return self._processor.retrieve(payment_intent_id)

    def cancel_payment_intent(self, payment_intent_id: str) -> Optional[Any]:
        if self.mock_mode:
            return None
        return self._processor.cancel(payment_intent_id)

    def validate_webhook_signature(self, payload: Union[str, bytes], signature: str) -> bool:
        """Check that a webhook body was signed with the configured secret.

        Returns True without checking anything when no webhook secret is
        configured or the gateway is in mock mode. Never raises: any
        verification failure is reported as False.
        """
        if not self.signature_enforced:
            return True

        try:
            self._processor.construct_event(payload, signature, self._webhook_secret)
        except Exception as e:
            logger.warning(f"Webhook signature verification failed: {type(e).__name__}")
            return False
        return True
