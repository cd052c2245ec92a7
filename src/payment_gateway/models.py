"""Canonical payment-intent models shared by the gateway, API and CLI."""

import enum
from typing import Optional, Dict
from pydantic import BaseModel, Field

# Metadata keys the webhook flow reads back to find the invoice being paid
INVOICE_ID_KEY = "invoiceId"
CLIENT_ACCOUNT_ID_KEY = "clientAccountId"


class PaymentIntentStatus(str, enum.Enum):
    """Canonical payment intent statuses.

    Live-mode statuses are reported verbatim from Stripe and are not re-mapped
    onto these values; mock mode only ever produces PENDING or SUCCEEDED.
    """
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


class PaymentIntentRequest(BaseModel):
    """Parameters for creating a payment intent."""
    amount: int = Field(..., description="Amount in the smallest currency unit")
    currency: str = Field(..., description="ISO currency code, passed through as given")
    metadata: Dict[str, str] = Field(default_factory=dict)
    invoice_id: Optional[str] = None
    client_account_id: Optional[str] = None
    description: Optional[str] = None

    def processor_metadata(self) -> Dict[str, str]:
        """Metadata as sent to the processor, with invoice/account ids folded in."""
        metadata = dict(self.metadata)
        if self.invoice_id:
            metadata[INVOICE_ID_KEY] = self.invoice_id
        if self.client_account_id:
            metadata[CLIENT_ACCOUNT_ID_KEY] = self.client_account_id
        return metadata


class PaymentIntentResult(BaseModel):
    """What a caller needs to hand off a new intent to the paying client."""
    id: str
    client_secret: str = ""


class WebhookEvent(BaseModel):
    """Canonical view of a verified Stripe webhook event."""
    id: Optional[str] = None
    type: str = "unknown"
    payment_intent_id: Optional[str] = None
    invoice_id: Optional[str] = None
    client_account_id: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    livemode: bool = False
