#!/usr/bin/env python3
"""Command-line interface for operating on payment intents.

Reads STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET from the environment; without
a secret key every command runs against mock mode.

Usage:
    payment-gateway create --amount 500 --currency sar --invoice-id inv_123
    payment-gateway status pi_3Nf...
    payment-gateway cancel pi_3Nf...
    payment-gateway verify-webhook --payload event.json --signature "t=...,v1=..."
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional, Any

import stripe

from .config import GatewayConfig
from .gateway import PaymentGateway
from .models import PaymentIntentRequest

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_PROCESSOR_ERROR = 2


def _log_level() -> int:
    """LOG_LEVEL as a logging level, INFO when unset or unrecognised."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _configure_logging() -> None:
    logging.basicConfig(
        level=_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _parse_metadata(pairs: Optional[list]) -> dict:
    """Turn ``key=value`` strings into a metadata mapping.

    Raises:
        ValueError: If a pair has no ``=``.
    """
    metadata = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid metadata entry '{pair}', expected key=value")
        metadata[key] = value
    return metadata


def _record_or_missing(payment_intent_id: str, record: Any) -> int:
    if record is None:
        _print_json({"id": payment_intent_id, "found": False})
        return EXIT_OK
    _print_json(record.to_dict() if hasattr(record, "to_dict") else dict(record))
    return EXIT_OK


def run_command(gateway: PaymentGateway, args: argparse.Namespace) -> int:
    """Execute a parsed command against the gateway.
    
    Args:
        gateway: Gateway to operate on.
        args: Parsed command-line arguments.
    
    Returns:
        Exit code.
    """
    if args.command == "create":
        try:
            metadata = _parse_metadata(args.metadata)
        except ValueError as e:
            logger.error(str(e))
            return EXIT_USAGE
        if args.amount <= 0:
            logger.error("Amount must be a positive integer in the smallest currency unit")
            return EXIT_USAGE
        result = gateway.create_payment_intent(PaymentIntentRequest(
            amount=args.amount,
            currency=args.currency,
            metadata=metadata,
            invoice_id=args.invoice_id,
            client_account_id=args.client_account_id,
            description=args.description,
        ))
        _print_json(result.model_dump())
        return EXIT_OK

    if args.command == "status":
        _print_json({"id": args.payment_intent_id, "status": gateway.verify_payment(args.payment_intent_id)})
        return EXIT_OK

    if args.command == "get":
        return _record_or_missing(args.payment_intent_id, gateway.get_payment_intent(args.payment_intent_id))

    if args.command == "cancel":
        return _record_or_missing(args.payment_intent_id, gateway.cancel_payment_intent(args.payment_intent_id))

    if args.command == "verify-webhook":
        try:
            with open(args.payload, "rb") as f:
                payload = f.read()
        except OSError as e:
            logger.error(f"Cannot read payload file: {e}")
            return EXIT_USAGE
        valid = gateway.validate_webhook_signature(payload, args.signature)
        _print_json({"valid": valid, "enforced": gateway.signature_enforced})
        return EXIT_OK if valid else EXIT_USAGE

    return EXIT_USAGE


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.
    
    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="payment-gateway",
        description="Create, inspect and cancel Stripe payment intents.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_parser_ = subparsers.add_parser("create", help="Create a payment intent")
    create_parser_.add_argument("--amount", "-a", type=int, required=True,
                                help="Amount in the smallest currency unit (e.g. halalas, cents)")
    create_parser_.add_argument("--currency", "-c", required=True, help="ISO currency code")
    create_parser_.add_argument("--invoice-id", help="Invoice being paid")
    create_parser_.add_argument("--client-account-id", help="Client account paying the invoice")
    create_parser_.add_argument("--description", help="Description shown on the Stripe dashboard")
    create_parser_.add_argument("--metadata", "-m", action="append", metavar="KEY=VALUE",
                                help="Extra metadata, may be repeated")

    for name, help_text in (
        ("status", "Show the status of a payment intent"),
        ("get", "Show the full payment intent record"),
        ("cancel", "Cancel a payment intent"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("payment_intent_id")

    webhook_parser = subparsers.add_parser("verify-webhook", help="Check a webhook signature")
    webhook_parser.add_argument("--payload", "-p", required=True, help="File holding the raw webhook body")
    webhook_parser.add_argument("--signature", "-s", required=True, help="Stripe-Signature header value")

    return parser


def main(args: Optional[list] = None, gateway: Optional[PaymentGateway] = None) -> int:
    """Main entry point for the CLI.
    
    Args:
        args: Optional list of command-line arguments (for testing).
        gateway: Optional gateway (for testing). Defaults to one built from the environment.
    
    Returns:
        Exit code.
    """
    _configure_logging()
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return EXIT_USAGE

    gateway = gateway or PaymentGateway(GatewayConfig.from_env())
    try:
        return run_command(gateway, parsed_args)
    except stripe.StripeError as e:
        logger.error(f"Stripe error: {e.user_message or e}")
        return EXIT_PROCESSOR_ERROR


if __name__ == "__main__":
    sys.exit(main())
