"""
Hyperliquid Info API client.

This module provides the HTTP client for the Hyperliquid Info endpoint.
Every query is a JSON POST to ``<base-url>/info`` whose ``type`` field
selects the server-side handler.
"""

import logging
from typing import Dict, Any, Optional

import requests

from hyperliquid_mcp_server.config import HyperliquidConfig

logger = logging.getLogger(__name__)


class HyperliquidAPIError(Exception):
    """Raised when the Info API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, request_type: Optional[str] = None):
        super().__init__(f"HTTP error! status: {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.request_type = request_type


class InfoClient:
    """
    HTTP client for the Hyperliquid Info API.

    Holds a single ``requests.Session`` and the timeout configured at
    construction. Errors are raised, never swallowed here; callers decide
    how to turn them into results.
    """

    def __init__(self, config: Optional[HyperliquidConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or HyperliquidConfig()
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json"
        })

    @property
    def is_testnet(self) -> bool:
        return self.config.testnet

    def post_info(self, payload: Dict[str, Any]) -> Any:
        """
        POST a raw request body to the Info endpoint.

        Args:
            payload: JSON body, must include the ``type`` discriminator

        Returns:
            Decoded JSON response

        Raises:
            HyperliquidAPIError: On a non-2xx response
            requests.RequestException: On transport failures
            ValueError: If the body is not valid JSON
        """
        request_type = payload.get("type")
        logger.debug(f"POST {self.config.info_url} type={request_type}")

        response = self.session.post(self.config.info_url, json=payload, timeout=self.config.timeout)

        if not response.ok:
            raise HyperliquidAPIError(response.status_code, response.text[:512], request_type)

        return response.json()

    def clearinghouse_state(self, user: str) -> Dict[str, Any]:
        """Perpetuals account summary and asset positions for a user."""
        return self.post_info({"type": "clearinghouseState", "user": user})

    def open_orders(self, user: str) -> list:
        """Open orders for a user."""
        return self.post_info({"type": "openOrders", "user": user})

    def user_fills(self, user: str) -> list:
        """Most recent fills for a user."""
        return self.post_info({"type": "userFills", "user": user})

    def meta(self) -> Dict[str, Any]:
        """Perpetuals metadata, including the market universe."""
        return self.post_info({"type": "meta"})

    def all_mids(self) -> Any:
        """Mid prices for all markets."""
        return self.post_info({"type": "allMids"})

    def meta_and_asset_ctxs(self) -> list:
        """Metadata plus positionally aligned asset contexts (funding, mark, oracle)."""
        return self.post_info({"type": "metaAndAssetCtxs"})

    def predicted_fundings(self) -> list:
        """Predicted funding rates per coin and venue."""
        return self.post_info({"type": "predictedFundings"})

    def close(self) -> None:
        self.session.close()
