"""
Market metadata and price tools.

Corresponds to Hyperliquid Info API types: meta, allMids
"""

import logging

from hyperliquid_mcp_server.service import HyperliquidService
from hyperliquid_mcp_server.utils import format_tool_result, handle_tool_errors

logger = logging.getLogger(__name__)


@handle_tool_errors("getMarkets")
def get_markets(service: HyperliquidService) -> str:
    """
    Get all available perpetual markets.

    Example Response:
        [
            {
                "name": "BTC",
                "szDecimals": 5,
                "maxLeverage": 40,
                "onlyIsolated": false
            }
        ]
    """
    return format_tool_result(service.get_markets())


@handle_tool_errors("getMarketPrice")
def get_market_price(service: HyperliquidService, coin: str) -> str:
    """
    Get the current mid price for one market.

    Example Response:
        {
            "coin": "BTC",
            "price": "97123.5"
        }

    ``price`` is ``null`` when the coin is unknown or the request failed.
    """
    price = service.get_market_price(coin)
    if price is None:
        logger.warning(f"No price available for {coin}")
    return format_tool_result({"coin": coin, "price": price})


@handle_tool_errors("getMeta")
def get_meta(service: HyperliquidService) -> str:
    return format_tool_result(service.get_meta())


@handle_tool_errors("getAllMids")
def get_all_mids(service: HyperliquidService) -> str:
    return format_tool_result(service.get_all_mids())
