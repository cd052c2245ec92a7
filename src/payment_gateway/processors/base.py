from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, Union


class PaymentProcessor(ABC):
    """
    Capability interface over a payment processor's payment-intent API.
    Implementations return the processor's own records and let the processor's
    exceptions propagate; they do not retry or classify failures.
    """

    @abstractmethod
    def create(
        self,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        description: Optional[str] = None,
    ) -> Any:
        """
        Create a payment intent and return the processor record.
        """
        raise NotImplementedError

    @abstractmethod
    def retrieve(self, payment_intent_id: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def cancel(self, payment_intent_id: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def construct_event(
        self, payload: Union[str, bytes], signature: str, secret: str
    ) -> Any:
        """
        Verify a webhook signature and return the parsed event; raises on failure.
        """
        raise NotImplementedError
