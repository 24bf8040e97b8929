"""
Funding rate tools.

Corresponds to Hyperliquid Info API types: metaAndAssetCtxs, predictedFundings
"""

import logging

from hyperliquid_mcp_server.service import HyperliquidService
from hyperliquid_mcp_server.utils import format_tool_result, handle_tool_errors

logger = logging.getLogger(__name__)


@handle_tool_errors("getFundingRates")
def get_funding_rates(service: HyperliquidService) -> str:
    """Funding context for every market as ``[meta, assetCtxs]``."""
    return format_tool_result(service.get_funding_rates())


@handle_tool_errors("getPredictedFundings")
def get_predicted_fundings(service: HyperliquidService) -> str:
    return format_tool_result(service.get_predicted_fundings())


@handle_tool_errors("getMarketFundingRate")
def get_market_funding_rate(service: HyperliquidService, coin: str) -> str:
    """
    Get the current funding rate for one market.

    Example Response:
        {
            "coin": "ETH",
            "currentFunding": "0.0000125",
            "premium": "0.0001",
            "markPrice": "3456.7",
            "oraclePrice": "3455.9"
        }
    """
    return format_tool_result(service.get_market_funding_rate(coin))


@handle_tool_errors("getNextFundingTime")
def get_next_funding_time(service: HyperliquidService, coin: str) -> str:
    """
    Get the next funding time on Hyperliquid's own venue.

    Example Response:
        {
            "nextFundingTime": 1733961600000,
            "fundingRate": "0.0000125"
        }
    """
    return format_tool_result(service.get_next_funding_time(coin))
