"""
Vault metrics and portfolio derivations.

Pure functions over a vault descriptor already fetched from the
``vaultDetails`` endpoint. No network access happens here.

A vault descriptor looks like:
    {
        "name": "...",
        "vaultAddress": "0x...",
        "leader": "0x...",
        "apr": 0.12,
        "leaderCommission": 0.1,
        "followers": [
            {"user": "0x...", "vaultEquity": "1000.0", "pnl": "12.5",
             "allTimePnl": "40.0", "daysFollowing": 30, ...}
        ],
        "portfolio": [["day", {"accountValueHistory": [...], "pnlHistory": [...], "vlm": "0.0"}], ...],
        "isClosed": false,
        "allowDeposits": true,
        "relationship": {"type": "parent", "data": {"childAddresses": ["0x..."]}}
    }
"""

import math
from typing import Dict, Any, List, Optional


def _parse_decimal(value: Any) -> float:
    """Parse a decimal string, yielding NaN when it is not a number."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def calculate_vault_metrics(vault: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Calculate aggregate performance metrics for a vault.

    Follower equity and PnL are summed as floats; unparseable values
    turn the corresponding sum into NaN.

    Args:
        vault: Vault descriptor

    Returns:
        Dict of metrics, or None if the vault has no portfolio history
    """
    if not vault.get("portfolio"):
        return None

    followers = vault.get("followers") or []
    total_followers = len(followers)

    if total_followers > 0:
        average_days = sum(f.get("daysFollowing") or 0 for f in followers) / total_followers
    else:
        average_days = 0

    return {
        "totalFollowers": total_followers,
        "totalEquity": sum((_parse_decimal(f.get("vaultEquity")) for f in followers), 0),
        "averageDaysFollowing": average_days,
        "totalPnl": sum((_parse_decimal(f.get("pnl")) for f in followers), 0),
        "totalAllTimePnl": sum((_parse_decimal(f.get("allTimePnl")) for f in followers), 0),
        "apr": vault.get("apr"),
        "leaderCommission": vault.get("leaderCommission"),
        "isAcceptingDeposits": vault.get("allowDeposits"),
        "isClosed": vault.get("isClosed"),
    }


def get_vault_portfolio_data(vault: Dict[str, Any]) -> Optional[Dict[str, Dict[str, Any]]]:
    """
    Reshape the vault's ``[period, data]`` portfolio pairs into a mapping.

    Returns:
        Dict keyed by period label ("day", "week", "month", "allTime", ...),
        or None if the vault has no portfolio history
    """
    portfolio = vault.get("portfolio")
    if not portfolio:
        return None

    portfolio_data = {}
    for period, data in portfolio:
        data = data or {}
        portfolio_data[period] = {
            "accountValueHistory": data.get("accountValueHistory") or [],
            "pnlHistory": data.get("pnlHistory") or [],
            "volume": data.get("vlm") or "0.0",
        }

    return portfolio_data


def get_vault_strategies(vault: Dict[str, Any]) -> List[str]:
    """Child vault addresses of a parent vault; empty for any other vault."""
    relationship = vault.get("relationship") or {}
    if relationship.get("type") != "parent":
        return []

    child_addresses = (relationship.get("data") or {}).get("childAddresses")
    return child_addresses or []


def has_vault_strategies(vault: Dict[str, Any]) -> bool:
    return len(get_vault_strategies(vault)) > 0
