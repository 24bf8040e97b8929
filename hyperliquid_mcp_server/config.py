"""
Hyperliquid Configuration.

This module provides configuration for the Hyperliquid Info API,
supporting both mainnet and testnet environments.
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT_SECONDS = 10.0


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class HyperliquidConfig:
    """Configuration management for the Hyperliquid MCP Server."""

    # Mainnet URL
    MAINNET_API_URL = "https://api.hyperliquid.xyz"

    # Testnet URL
    TESTNET_API_URL = "https://api.hyperliquid-testnet.xyz"

    def __init__(self, testnet: Optional[bool] = None, timeout: Optional[float] = None):
        if testnet is None:
            testnet = _env_flag("HYPERLIQUID_TESTNET")
        self.testnet = testnet

        if timeout is None:
            timeout = float(os.getenv("HYPERLIQUID_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS)))
        self.timeout = timeout

    @property
    def base_url(self) -> str:
        """Get appropriate base URL based on testnet setting."""
        if self.testnet:
            return self.TESTNET_API_URL
        return self.MAINNET_API_URL

    @property
    def info_url(self) -> str:
        """Get the Info endpoint URL."""
        return f"{self.base_url}/info"

    @property
    def network(self) -> str:
        return "testnet" if self.testnet else "mainnet"

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return self.timeout > 0

    def get_validation_errors(self) -> list:
        """Get list of configuration validation errors."""
        errors = []
        if self.timeout <= 0:
            errors.append("HYPERLIQUID_HTTP_TIMEOUT must be a positive number of seconds")
        return errors

    def __repr__(self) -> str:
        return f"HyperliquidConfig(network={self.network!r}, timeout={self.timeout})"
