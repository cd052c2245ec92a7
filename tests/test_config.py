"""Tests for configuration loading."""

import os
from unittest.mock import patch

from payment_gateway import GatewayConfig, ServiceSettings
from payment_gateway.config import DEFAULT_RATE_LIMIT


class TestGatewayConfig:
    """Tests for GatewayConfig.from_env."""

    def test_reads_stripe_variables(self):
        """Test that both Stripe secrets are read."""
        with patch.dict(os.environ, {
            "STRIPE_SECRET_KEY": "sk_test_env",
            "STRIPE_WEBHOOK_SECRET": "whsec_env",
        }):
            config = GatewayConfig.from_env()
            assert config.secret_key == "sk_test_env"
            assert config.webhook_secret == "whsec_env"
            assert config.processor is None

    def test_missing_variables_are_none(self, clean_stripe_env):
        """Test that unset variables leave the fields empty."""
        config = GatewayConfig.from_env()
        assert config.secret_key is None
        assert config.webhook_secret is None

    def test_empty_variables_are_none(self):
        """Test that empty strings count as unset."""
        with patch.dict(os.environ, {"STRIPE_SECRET_KEY": "", "STRIPE_WEBHOOK_SECRET": ""}):
            config = GatewayConfig.from_env()
            assert config.secret_key is None
            assert config.webhook_secret is None


class TestServiceSettings:
    """Tests for ServiceSettings.from_env."""

    def test_reads_api_key_and_rate_limit(self):
        """Test that API_KEY and RATE_LIMIT are read."""
        with patch.dict(os.environ, {"API_KEY": "key_1", "RATE_LIMIT": "5/second"}):
            settings = ServiceSettings.from_env()
            assert settings.api_key == "key_1"
            assert settings.rate_limit == "5/second"

    def test_default_rate_limit(self):
        """Test the default rate limit."""
        with patch.dict(os.environ, {"RATE_LIMIT": ""}):
            assert ServiceSettings.from_env().rate_limit == DEFAULT_RATE_LIMIT
