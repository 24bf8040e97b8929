"""
Vault tools.

Corresponds to Hyperliquid Info API types: vaultDetails, userVaultEquities, subAccounts.
Metrics, portfolio and strategy tools fetch the vault once and derive their
result locally.
"""

import logging
from typing import Dict, Any, Optional

from fastmcp.exceptions import ToolError

from hyperliquid_mcp_server import vaults
from hyperliquid_mcp_server.service import HyperliquidService
from hyperliquid_mcp_server.utils import (
    INVALID_USER_ADDRESS_MESSAGE,
    INVALID_VAULT_ADDRESS_MESSAGE,
    VAULT_NOT_FOUND_MESSAGE,
    format_tool_result,
    handle_tool_errors,
    require_address,
)

logger = logging.getLogger(__name__)


def _fetch_vault(service: HyperliquidService, vault_address: str) -> Dict[str, Any]:
    vault_address = require_address(vault_address, INVALID_VAULT_ADDRESS_MESSAGE)
    vault_details = service.get_vault_details(vault_address)
    if vault_details is None:
        logger.warning(f"Vault not found: {vault_address}")
        raise ToolError(VAULT_NOT_FOUND_MESSAGE)
    return vault_details


@handle_tool_errors("getVaultDetails")
def get_vault_details(service: HyperliquidService, vault_address: str, user_address: Optional[str] = None) -> str:
    """
    Get detailed information about a vault.

    Args:
        service: Hyperliquid service to query
        vault_address: Vault address (0x format)
        user_address: Optional user address for user-specific vault data

    Returns:
        JSON text of the vault descriptor, or ``null`` if it could not be fetched

    Raises:
        ToolError: If either address is malformed
    """
    vault_address = require_address(vault_address, INVALID_VAULT_ADDRESS_MESSAGE)
    if user_address:
        user_address = require_address(user_address, INVALID_USER_ADDRESS_MESSAGE)

    result = service.get_vault_details(vault_address, user_address or None)
    return format_tool_result(result)


@handle_tool_errors("getUserVaultEquities")
def get_user_vault_equities(service: HyperliquidService, user_address: str) -> str:
    user_address = require_address(user_address)
    return format_tool_result(service.get_user_vault_equities(user_address))


@handle_tool_errors("getUserSubAccounts")
def get_user_sub_accounts(service: HyperliquidService, user_address: str) -> str:
    user_address = require_address(user_address)
    return format_tool_result(service.get_user_sub_accounts(user_address))


@handle_tool_errors("calculateVaultMetrics")
def calculate_vault_metrics(service: HyperliquidService, vault_address: str) -> str:
    """
    Calculate follower and performance metrics for a vault.

    Example Response:
        {
            "totalFollowers": 2,
            "totalEquity": 1500.0,
            "averageDaysFollowing": 12.5,
            "totalPnl": 42.0,
            "totalAllTimePnl": 88.0,
            "apr": 0.21,
            "leaderCommission": 0.1,
            "isAcceptingDeposits": true,
            "isClosed": false
        }

    Returns ``null`` when the vault has no portfolio history.
    """
    vault_details = _fetch_vault(service, vault_address)
    return format_tool_result(vaults.calculate_vault_metrics(vault_details))


@handle_tool_errors("getVaultPortfolioData")
def get_vault_portfolio_data(service: HyperliquidService, vault_address: str) -> str:
    vault_details = _fetch_vault(service, vault_address)
    return format_tool_result(vaults.get_vault_portfolio_data(vault_details))


@handle_tool_errors("isValidVaultAddress")
def is_valid_vault_address(service: HyperliquidService, address: str) -> str:
    """Check whether an address is well formed and resolves to a vault."""
    is_valid = service.is_valid_vault_address(address)
    return format_tool_result({"address": address, "isValidVault": is_valid})


@handle_tool_errors("getVaultStrategies")
def get_vault_strategies(service: HyperliquidService, vault_address: str) -> str:
    """
    List the child vaults (strategies) of a parent vault.

    Example Response:
        {
            "vaultAddress": "0x...",
            "strategies": ["0x...", "0x..."],
            "hasStrategies": true,
            "strategiesCount": 2
        }
    """
    vault_details = _fetch_vault(service, vault_address)
    strategies = vaults.get_vault_strategies(vault_details)
    return format_tool_result({
        "vaultAddress": vault_address,
        "strategies": strategies,
        "hasStrategies": vaults.has_vault_strategies(vault_details),
        "strategiesCount": len(strategies),
    })
