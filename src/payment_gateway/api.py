import logging
from typing import Optional, Dict, Any

import stripe
from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .auth import verify_api_key, create_limiter
from .config import GatewayConfig, ServiceSettings
from .gateway import PaymentGateway
from .models import PaymentIntentRequest, PaymentIntentResult
from .webhooks import parse_webhook_event

logger = logging.getLogger(__name__)

webhook_router = APIRouter(prefix="/webhooks", tags=["webhooks"])


class CreatePaymentIntentBody(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in the smallest currency unit")
    currency: str = Field(..., min_length=1)
    metadata: Dict[str, str] = Field(default_factory=dict)
    invoice_id: Optional[str] = None
    client_account_id: Optional[str] = None
    description: Optional[str] = None


def get_gateway(request: Request) -> PaymentGateway:
    return request.app.state.gateway


def _record_to_dict(record: Any) -> Dict[str, Any]:
    if hasattr(record, "to_dict"):
        return record.to_dict()
    return dict(record)


def create_payment_intent(
    request: Request,
    body: CreatePaymentIntentBody,
    gateway: PaymentGateway = Depends(get_gateway),
    api_key: str = Depends(verify_api_key),
):
    result = gateway.create_payment_intent(PaymentIntentRequest(**body.model_dump()))
    logger.info(f"Created payment intent {result.id} for invoice {body.invoice_id}")
    return result


def get_payment_intent(
    request: Request,
    payment_intent_id: str,
    gateway: PaymentGateway = Depends(get_gateway),
    api_key: str = Depends(verify_api_key),
):
    record = gateway.get_payment_intent(payment_intent_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Payment intent not found")
    return _record_to_dict(record)


def get_payment_intent_status(
    request: Request,
    payment_intent_id: str,
    gateway: PaymentGateway = Depends(get_gateway),
    api_key: str = Depends(verify_api_key),
):
    return {
        "id": payment_intent_id,
        "status": gateway.verify_payment(payment_intent_id),
        "authoritative": not gateway.mock_mode,
    }


def cancel_payment_intent(
    request: Request,
    payment_intent_id: str,
    gateway: PaymentGateway = Depends(get_gateway),
    api_key: str = Depends(verify_api_key),
):
    record = gateway.cancel_payment_intent(payment_intent_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Payment intent not found")
    logger.info(f"Canceled payment intent {payment_intent_id}")
    return _record_to_dict(record)


def build_payments_router(limiter: Limiter, rate_limit: str) -> APIRouter:
    """Billing routes, each limited to ``rate_limit`` by the given limiter."""
    router = APIRouter(prefix="/payments", tags=["payments"])
    limit = limiter.limit(rate_limit)
    router.add_api_route(
        "/intents", limit(create_payment_intent), methods=["POST"], response_model=PaymentIntentResult
    )
    router.add_api_route("/intents/{payment_intent_id}", limit(get_payment_intent), methods=["GET"])
    router.add_api_route(
        "/intents/{payment_intent_id}/status", limit(get_payment_intent_status), methods=["GET"]
    )
    router.add_api_route(
        "/intents/{payment_intent_id}/cancel", limit(cancel_payment_intent), methods=["POST"]
    )
    return router


@webhook_router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    gateway: PaymentGateway = Depends(get_gateway),
):
    body = await request.body()
    if not gateway.validate_webhook_signature(body, stripe_signature or ""):
        logger.warning("Rejected Stripe webhook with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid signature")
    try:
        event = parse_webhook_event(body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    # Invoice settlement happens downstream of this acknowledgement
    return {"received": True, "event": event.model_dump()}


async def stripe_error_handler(request: Request, exc: stripe.StripeError) -> JSONResponse:
    """Surface processor failures with the processor's own status code where it has one."""
    status_code = exc.http_status if exc.http_status and exc.http_status >= 400 else 502
    logger.error(f"Stripe error on {request.url.path}: {exc.code or type(exc).__name__}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.user_message or str(exc), "code": exc.code},
    )


def create_app(
    gateway: Optional[PaymentGateway] = None,
    settings: Optional[ServiceSettings] = None,
) -> FastAPI:
    """Build the API around an explicitly supplied gateway.

    Args:
        gateway: Gateway to serve. Defaults to one built from the environment.
        settings: HTTP settings. Defaults to ServiceSettings.from_env().

    Returns:
        Configured FastAPI application with its own rate limiter.
    """
    app = FastAPI(title="Payment Gateway API")
    app.state.gateway = gateway or PaymentGateway(GatewayConfig.from_env())
    app.state.settings = settings or ServiceSettings.from_env()
    app.state.limiter = create_limiter()
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(stripe.StripeError, stripe_error_handler)

    @app.get("/health")
    def health():
        gw: PaymentGateway = app.state.gateway
        return {
            "ok": True,
            "mode": "mock" if gw.mock_mode else "live",
            "signature_enforced": gw.signature_enforced,
        }

    app.include_router(build_payments_router(app.state.limiter, app.state.settings.rate_limit))
    app.include_router(webhook_router)
    return app
