"""Explicit configuration for the gateway and the HTTP service."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .processors.base import PaymentProcessor

DEFAULT_RATE_LIMIT = "60/minute"


def _env(name: str) -> Optional[str]:
    """Read an environment variable, treating an empty value as unset."""
    value = os.getenv(name)
    return value or None


class GatewayConfig(BaseModel):
    """Configuration captured by a PaymentGateway at construction.

    Attributes:
        secret_key: Stripe secret key. Absent means mock mode.
        webhook_secret: Stripe webhook signing secret. Absent means webhook
            signatures are not checked.
        processor: Optional pre-built processor client. When omitted and a
            secret key is present, a StripeProcessor is built from the key.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    secret_key: Optional[str] = None
    webhook_secret: Optional[str] = None
    processor: Optional[PaymentProcessor] = None

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Build a config from STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET."""
        return cls(
            secret_key=_env("STRIPE_SECRET_KEY"),
            webhook_secret=_env("STRIPE_WEBHOOK_SECRET"),
        )


class ServiceSettings(BaseModel):
    """Settings for the HTTP surface in front of the gateway."""
    api_key: Optional[str] = None
    rate_limit: str = DEFAULT_RATE_LIMIT

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        return cls(
            api_key=_env("API_KEY"),
            rate_limit=_env("RATE_LIMIT") or DEFAULT_RATE_LIMIT,
        )
