# payment_gateway package
__version__ = "0.1.0"

from .config import GatewayConfig, ServiceSettings
from .gateway import PaymentGateway, MOCK_ID_PREFIX, is_mock_payment_intent_id
from .models import (
    PaymentIntentRequest,
    PaymentIntentResult,
    PaymentIntentStatus,
    WebhookEvent,
)
from .processors import PaymentProcessor, StripeProcessor
from .webhooks import parse_webhook_event
