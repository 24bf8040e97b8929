"""
Hyperliquid MCP Server implementation using FastMCP.

This module provides a Model Context Protocol (MCP) server for querying the
Hyperliquid decentralized exchange Info API. It exposes read-only market,
position, funding and vault queries as tools that can be called by LLM clients.
"""

import sys
import logging
import argparse
from typing import Optional
from fastmcp import FastMCP
from dotenv import load_dotenv

from hyperliquid_mcp_server import __version__, tools
from hyperliquid_mcp_server.config import HyperliquidConfig
from hyperliquid_mcp_server.service import HyperliquidService, create_services


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr
)


logger = logging.getLogger(__name__)


INSTRUCTIONS = """
    This server provides read-only access to the Hyperliquid decentralized exchange.

    All addresses must be 0x-prefixed, 40 hex digit strings. Market symbols
    (e.g. 'BTC', 'ETH') are matched case-insensitively.

    AVAILABLE TOOLS:

    Trader Positions:
    - HYPERLIQUID_getTraderPositions: All positions and margin summary for a trader
    - HYPERLIQUID_getTraderPositionForMarket: A trader's position in one market
    - HYPERLIQUID_getOpenOrders: Open orders for a trader
    - HYPERLIQUID_getUserFills: Trading history (fills) for a trader

    Market Data:
    - HYPERLIQUID_getMarkets: All perpetual markets with size decimals and max leverage
    - HYPERLIQUID_getMarketPrice: Current mid price for one market
    - HYPERLIQUID_getMeta: Raw exchange metadata
    - HYPERLIQUID_getAllMids: All current mid prices

    Funding:
    - HYPERLIQUID_getFundingRates: Funding context for all markets
    - HYPERLIQUID_getPredictedFundings: Predicted funding rates per venue
    - HYPERLIQUID_getMarketFundingRate: Funding rate, premium, mark and oracle price for one market
    - HYPERLIQUID_getNextFundingTime: Next funding time and rate for one market

    Vaults:
    - HYPERLIQUID_getVaultDetails: Vault details, optionally with user-specific data
    - HYPERLIQUID_getUserVaultEquities: A user's vault deposits
    - HYPERLIQUID_getUserSubAccounts: A user's subaccounts
    - HYPERLIQUID_calculateVaultMetrics: Follower and performance metrics for a vault
    - HYPERLIQUID_getVaultPortfolioData: Account value and PnL history per period
    - HYPERLIQUID_isValidVaultAddress: Check an address resolves to a vault
    - HYPERLIQUID_getVaultStrategies: Child vaults (strategies) of a parent vault

    Lookups that find nothing, or whose request fails, return null (or an
    empty list). Malformed addresses are reported as tool errors.
    """


def create_server(service: HyperliquidService) -> FastMCP:
    """
    Create the FastMCP server with every Hyperliquid tool bound to a service.

    Args:
        service: The service instance (mainnet or testnet) tools should query

    Returns:
        FastMCP: Configured server, not yet running
    """
    mcp = FastMCP(
        name="hyperliquid-mcp-server",
        version=__version__,
        instructions=INSTRUCTIONS,
    )

    # == Trader Positions ==

    @mcp.tool(name="HYPERLIQUID_getTraderPositions")
    def get_trader_positions(userAddress: str) -> str:
        """
        Get all positions for a specific trader on Hyperliquid.

        Args:
            userAddress: The trader's wallet address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_getTraderPositions with userAddress={userAddress}")
        return tools.get_trader_positions(service, userAddress)

    @mcp.tool(name="HYPERLIQUID_getTraderPositionForMarket")
    def get_trader_position_for_market(userAddress: str, coin: str) -> str:
        """
        Get a trader's position for a specific market/coin on Hyperliquid.

        Args:
            userAddress: The trader's wallet address (0x format).
            coin: The market/coin symbol (e.g., 'BTC', 'ETH').
        """
        logger.info(f"Tool called: HYPERLIQUID_getTraderPositionForMarket with userAddress={userAddress}, coin={coin}")
        return tools.get_trader_position_for_market(service, userAddress, coin)

    @mcp.tool(name="HYPERLIQUID_getOpenOrders")
    def get_open_orders(userAddress: str) -> str:
        """
        Get open orders for a trader on Hyperliquid.

        Args:
            userAddress: The trader's wallet address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_getOpenOrders with userAddress={userAddress}")
        return tools.get_open_orders(service, userAddress)

    @mcp.tool(name="HYPERLIQUID_getUserFills")
    def get_user_fills(userAddress: str) -> str:
        """
        Get trading history (fills) for a user on Hyperliquid.

        Args:
            userAddress: The trader's wallet address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_getUserFills with userAddress={userAddress}")
        return tools.get_user_fills(service, userAddress)

    # == Market Data ==

    @mcp.tool(name="HYPERLIQUID_getMarkets")
    def get_markets() -> str:
        """Get all available markets/assets on Hyperliquid."""
        logger.info("Tool called: HYPERLIQUID_getMarkets")
        return tools.get_markets(service)

    @mcp.tool(name="HYPERLIQUID_getMarketPrice")
    def get_market_price(coin: str) -> str:
        """
        Get current price for a specific market on Hyperliquid.

        Args:
            coin: The market/coin symbol (e.g., 'BTC', 'ETH').
        """
        logger.info(f"Tool called: HYPERLIQUID_getMarketPrice with coin={coin}")
        return tools.get_market_price(service, coin)

    @mcp.tool(name="HYPERLIQUID_getMeta")
    def get_meta() -> str:
        """Get meta information about the Hyperliquid exchange."""
        logger.info("Tool called: HYPERLIQUID_getMeta")
        return tools.get_meta(service)

    @mcp.tool(name="HYPERLIQUID_getAllMids")
    def get_all_mids() -> str:
        """Get all current mid prices on Hyperliquid."""
        logger.info("Tool called: HYPERLIQUID_getAllMids")
        return tools.get_all_mids(service)

    # == Funding ==

    @mcp.tool(name="HYPERLIQUID_getFundingRates")
    def get_funding_rates() -> str:
        """Get funding rates for all markets on Hyperliquid."""
        logger.info("Tool called: HYPERLIQUID_getFundingRates")
        return tools.get_funding_rates(service)

    @mcp.tool(name="HYPERLIQUID_getPredictedFundings")
    def get_predicted_fundings() -> str:
        """Get predicted funding rates for all markets on Hyperliquid."""
        logger.info("Tool called: HYPERLIQUID_getPredictedFundings")
        return tools.get_predicted_fundings(service)

    @mcp.tool(name="HYPERLIQUID_getMarketFundingRate")
    def get_market_funding_rate(coin: str) -> str:
        """
        Get funding rate for a specific market on Hyperliquid.

        Args:
            coin: The market/coin symbol (e.g., 'BTC', 'ETH').
        """
        logger.info(f"Tool called: HYPERLIQUID_getMarketFundingRate with coin={coin}")
        return tools.get_market_funding_rate(service, coin)

    @mcp.tool(name="HYPERLIQUID_getNextFundingTime")
    def get_next_funding_time(coin: str) -> str:
        """
        Get next funding time for a specific market on Hyperliquid.

        Args:
            coin: The market/coin symbol (e.g., 'BTC', 'ETH').
        """
        logger.info(f"Tool called: HYPERLIQUID_getNextFundingTime with coin={coin}")
        return tools.get_next_funding_time(service, coin)

    # == Vaults ==

    @mcp.tool(name="HYPERLIQUID_getVaultDetails")
    def get_vault_details(vaultAddress: str, userAddress: Optional[str] = None) -> str:
        """
        Get detailed information about a specific vault on Hyperliquid.

        Args:
            vaultAddress: The vault address (0x format).
            userAddress: Optional user address to get user-specific vault data.
        """
        logger.info(f"Tool called: HYPERLIQUID_getVaultDetails with vaultAddress={vaultAddress}, userAddress={userAddress}")
        return tools.get_vault_details(service, vaultAddress, userAddress)

    @mcp.tool(name="HYPERLIQUID_getUserVaultEquities")
    def get_user_vault_equities(userAddress: str) -> str:
        """
        Get a user's vault equities/deposits on Hyperliquid.

        Args:
            userAddress: The user's wallet address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_getUserVaultEquities with userAddress={userAddress}")
        return tools.get_user_vault_equities(service, userAddress)

    @mcp.tool(name="HYPERLIQUID_getUserSubAccounts")
    def get_user_sub_accounts(userAddress: str) -> str:
        """
        Get user's subaccounts on Hyperliquid.

        Args:
            userAddress: The user's wallet address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_getUserSubAccounts with userAddress={userAddress}")
        return tools.get_user_sub_accounts(service, userAddress)

    @mcp.tool(name="HYPERLIQUID_calculateVaultMetrics")
    def calculate_vault_metrics(vaultAddress: str) -> str:
        """
        Calculate performance metrics for a vault on Hyperliquid.

        Args:
            vaultAddress: The vault address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_calculateVaultMetrics with vaultAddress={vaultAddress}")
        return tools.calculate_vault_metrics(service, vaultAddress)

    @mcp.tool(name="HYPERLIQUID_getVaultPortfolioData")
    def get_vault_portfolio_data(vaultAddress: str) -> str:
        """
        Get portfolio performance data for a vault on Hyperliquid.

        Args:
            vaultAddress: The vault address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_getVaultPortfolioData with vaultAddress={vaultAddress}")
        return tools.get_vault_portfolio_data(service, vaultAddress)

    @mcp.tool(name="HYPERLIQUID_isValidVaultAddress")
    def is_valid_vault_address(address: str) -> str:
        """
        Check if an address is a valid vault address on Hyperliquid.

        Args:
            address: The address to validate as a vault address.
        """
        logger.info(f"Tool called: HYPERLIQUID_isValidVaultAddress with address={address}")
        return tools.is_valid_vault_address(service, address)

    @mcp.tool(name="HYPERLIQUID_getVaultStrategies")
    def get_vault_strategies(vaultAddress: str) -> str:
        """
        Get vault strategies (child addresses) for a vault on Hyperliquid.

        Args:
            vaultAddress: The vault address (0x format).
        """
        logger.info(f"Tool called: HYPERLIQUID_getVaultStrategies with vaultAddress={vaultAddress}")
        return tools.get_vault_strategies(service, vaultAddress)

    return mcp


def validate_configuration(config: HyperliquidConfig) -> bool:
    """
    Validate server configuration.

    Returns:
        bool: True if configuration is valid, False otherwise
    """
    if not config.is_valid():
        logger.error("Invalid Hyperliquid configuration:")
        for error in config.get_validation_errors():
            logger.error(f"  • {error}")
        return False

    logger.info(f"Configuration validated successfully (network: {config.network}, timeout: {config.timeout}s)")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hyperliquid MCP Server - read-only Hyperliquid Info API tools over MCP"
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http", "sse"],
        default="stdio",
        help="Transport method to use (default: stdio)"
    )
    parser.add_argument("--host", default="localhost", help="Host for HTTP transports")
    parser.add_argument("--port", type=int, default=8000, help="Port for HTTP transports")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )
    parser.add_argument(
        "--testnet",
        action="store_true",
        default=None,
        help="Make the testnet the default network (overrides HYPERLIQUID_TESTNET)"
    )
    return parser


def main() -> None:
    """
    Entry point for the Hyperliquid MCP Server.

    Exit Codes:
        0: Clean shutdown
        1: Invalid configuration
        84: Server runtime error
    """
    load_dotenv()
    args = build_parser().parse_args()
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    try:
        config = HyperliquidConfig(testnet=args.testnet)
    except ValueError as e:
        logger.error(f"Invalid configuration value: {str(e)}")
        sys.exit(1)

    if not validate_configuration(config):
        sys.exit(1)

    services = create_services(use_testnet=config.testnet, timeout=config.timeout)
    mcp = create_server(services.default)
    logger.info(f"Starting Hyperliquid MCP Server ({args.transport}, {config.network})")

    try:
        if args.transport == "stdio":
            mcp.run(transport="stdio")
        else:
            mcp.run(transport=args.transport, host=args.host, port=args.port)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user (Ctrl+C)")
    except Exception as e:
        logger.error(f"Server stopped with error: {str(e)}")
        sys.exit(84)
    finally:
        services.close()


if __name__ == "__main__":
    main()
