"""Payment processor clients."""

from .base import PaymentProcessor
from .stripe_processor import StripeProcessor

__all__ = [
    "PaymentProcessor",
    "StripeProcessor",
]
