"""
Trader position, order and fill tools.

Corresponds to Hyperliquid Info API types: clearinghouseState, openOrders, userFills
"""

import logging

from hyperliquid_mcp_server.service import HyperliquidService
from hyperliquid_mcp_server.utils import (
    format_tool_result,
    handle_tool_errors,
    require_address,
)

logger = logging.getLogger(__name__)


@handle_tool_errors("getTraderPositions")
def get_trader_positions(service: HyperliquidService, user_address: str) -> str:
    """
    Get all positions for a trader.

    Args:
        service: Hyperliquid service to query
        user_address: Trader wallet address (0x format)

    Returns:
        JSON text of the clearinghouse state (margin summary, asset positions),
        or ``null`` if it could not be fetched

    Raises:
        ToolError: If the address is malformed
    """
    user_address = require_address(user_address)
    result = service.get_trader_positions(user_address)
    return format_tool_result(result)


@handle_tool_errors("getTraderPositionForMarket")
def get_trader_position_for_market(service: HyperliquidService, user_address: str, coin: str) -> str:
    """
    Get a trader's position for one market.

    Returns:
        JSON text of the matching asset position, or ``null`` when the trader
        holds no position in ``coin`` or the lookup failed
    """
    user_address = require_address(user_address)
    result = service.get_trader_position_for_market(user_address, coin)
    return format_tool_result(result)


@handle_tool_errors("getOpenOrders")
def get_open_orders(service: HyperliquidService, user_address: str) -> str:
    user_address = require_address(user_address)
    return format_tool_result(service.get_open_orders(user_address))


@handle_tool_errors("getUserFills")
def get_user_fills(service: HyperliquidService, user_address: str) -> str:
    user_address = require_address(user_address)
    return format_tool_result(service.get_user_fills(user_address))
