"""
Invoice checkout usage example (server-side). The billing workflow creates a
payment intent for an invoice, hands the client secret to the client portal,
and later polls the status. Without STRIPE_SECRET_KEY this runs in mock mode.
"""
from payment_gateway import GatewayConfig, PaymentGateway, PaymentIntentRequest

def run():
    gateway = PaymentGateway(GatewayConfig.from_env())
    result = gateway.create_payment_intent(PaymentIntentRequest(
        amount=500,
        currency="sar",
        invoice_id="inv_1001",
        client_account_id="acct_42",
        description="Invoice INV-1001",
    ))
    print("Created:", result.model_dump_json())
    print("Status:", gateway.verify_payment(result.id))

if __name__ == "__main__":
    run()
