#!/usr/bin/env python3
"""
Demo script for the Hyperliquid MCP tools.

Calls the tools directly (without an MCP client) against the live Info API
and prints their JSON output.

Usage:
    # Optional: query the testnet
    export HYPERLIQUID_TESTNET="true"

    # Run every demo
    python scripts/demo_hyperliquid_tools.py

    # Or run a specific group
    python scripts/demo_hyperliquid_tools.py --tool markets
    python scripts/demo_hyperliquid_tools.py --tool funding --coin ETH
    python scripts/demo_hyperliquid_tools.py --tool trader --address 0x...
    python scripts/demo_hyperliquid_tools.py --tool vault --vault 0x...
"""

import os
import sys
import argparse

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from fastmcp.exceptions import ToolError

from hyperliquid_mcp_server import tools
from hyperliquid_mcp_server.service import HyperliquidService, create_services


# Hyperliquidity Provider (HLP), a parent vault with child strategies
DEFAULT_VAULT = "0xdfc24b077bc1425ad1dea75bcb6f8158e10df303"


def pretty_print(title: str, text: str) -> None:
    """Print a tool's JSON output under a banner."""
    print(f"\n{'='*60}")
    print(f"  {title}")
    print('='*60)
    print(text)
    print()


def run(title: str, func, *args) -> None:
    try:
        pretty_print(title, func(*args))
    except ToolError as e:
        pretty_print(f"{title} (error)", str(e))


def demo_markets(service: HyperliquidService, coin: str) -> None:
    run("getMarkets", tools.get_markets, service)
    run(f"getMarketPrice {coin}", tools.get_market_price, service, coin)


def demo_funding(service: HyperliquidService, coin: str) -> None:
    run(f"getMarketFundingRate {coin}", tools.get_market_funding_rate, service, coin)
    run(f"getNextFundingTime {coin}", tools.get_next_funding_time, service, coin)


def demo_trader(service: HyperliquidService, address: str, coin: str) -> None:
    run("getTraderPositions", tools.get_trader_positions, service, address)
    run(f"getTraderPositionForMarket {coin}", tools.get_trader_position_for_market, service, address, coin)
    run("getOpenOrders", tools.get_open_orders, service, address)
    run("getUserVaultEquities", tools.get_user_vault_equities, service, address)


def demo_vault(service: HyperliquidService, vault_address: str) -> None:
    run("calculateVaultMetrics", tools.calculate_vault_metrics, service, vault_address)
    run("getVaultStrategies", tools.get_vault_strategies, service, vault_address)
    run("isValidVaultAddress", tools.is_valid_vault_address, service, vault_address)


def main() -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Demo the Hyperliquid MCP tools")
    parser.add_argument(
        "--tool",
        choices=["markets", "funding", "trader", "vault", "all"],
        default="all",
        help="Which tool group to demo"
    )
    parser.add_argument(
        "--network",
        choices=["mainnet", "testnet"],
        help="Network to query (default: HYPERLIQUID_TESTNET)"
    )
    parser.add_argument("--coin", default="BTC", help="Market symbol (default: BTC)")
    parser.add_argument("--address", help="Trader address for the trader demo")
    parser.add_argument("--vault", default=DEFAULT_VAULT, help="Vault address for the vault demo")
    args = parser.parse_args()

    services = create_services()
    if args.network:
        service = getattr(services, args.network)
    else:
        service = services.default
    print(f"Querying {service.config.info_url}")

    try:
        if args.tool in ("markets", "all"):
            demo_markets(service, args.coin)
        if args.tool in ("funding", "all"):
            demo_funding(service, args.coin)
        if args.tool in ("trader", "all"):
            if args.address:
                demo_trader(service, args.address, args.coin)
            elif args.tool == "trader":
                parser.error("--address is required for the trader demo")
        if args.tool in ("vault", "all"):
            demo_vault(service, args.vault)
    finally:
        services.close()


if __name__ == "__main__":
    main()
