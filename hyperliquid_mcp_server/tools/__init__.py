"""
Hyperliquid MCP Tools.

Each tool takes the HyperliquidService to query as its first argument,
validates addresses, and returns pretty-printed JSON text. Validation and
not-found failures are raised as FastMCP ToolErrors.
"""

from hyperliquid_mcp_server.tools.positions import (
    get_trader_positions,
    get_trader_position_for_market,
    get_open_orders,
    get_user_fills,
)
from hyperliquid_mcp_server.tools.markets import (
    get_markets,
    get_market_price,
    get_meta,
    get_all_mids,
)
from hyperliquid_mcp_server.tools.funding import (
    get_funding_rates,
    get_predicted_fundings,
    get_market_funding_rate,
    get_next_funding_time,
)
from hyperliquid_mcp_server.tools.vaults import (
    get_vault_details,
    get_user_vault_equities,
    get_user_sub_accounts,
    calculate_vault_metrics,
    get_vault_portfolio_data,
    is_valid_vault_address,
    get_vault_strategies,
)

__all__ = [
    # Trader positions
    "get_trader_positions",
    "get_trader_position_for_market",
    "get_open_orders",
    "get_user_fills",
    # Markets
    "get_markets",
    "get_market_price",
    "get_meta",
    "get_all_mids",
    # Funding
    "get_funding_rates",
    "get_predicted_fundings",
    "get_market_funding_rate",
    "get_next_funding_time",
    # Vaults
    "get_vault_details",
    "get_user_vault_equities",
    "get_user_sub_accounts",
    "calculate_vault_metrics",
    "get_vault_portfolio_data",
    "is_valid_vault_address",
    "get_vault_strategies",
]
