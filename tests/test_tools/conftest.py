"""
Shared fixtures for Hyperliquid tool tests.
"""

import pytest
from unittest.mock import Mock

from hyperliquid_mcp_server.client import InfoClient
from hyperliquid_mcp_server.config import HyperliquidConfig
from hyperliquid_mcp_server.service import HyperliquidService


TRADER = "0x" + "ab" * 20
VAULT = "0xdfc24b077bc1425AD1DEA75bCB6f8158E10Df303"


@pytest.fixture
def mock_client():
    """An InfoClient double with the mainnet config."""
    client = Mock(spec=InfoClient)
    client.config = HyperliquidConfig(testnet=False, timeout=10)
    return client


@pytest.fixture
def service(mock_client):
    """A service whose network calls go to the mocked client."""
    return HyperliquidService(mock_client.config, client=mock_client)


@pytest.fixture
def meta():
    """A small market universe."""
    return {
        "universe": [
            {"name": "BTC", "szDecimals": 5, "maxLeverage": 40},
            {"name": "SOL", "szDecimals": 2, "maxLeverage": 20, "onlyIsolated": False},
            {"name": "ETH", "szDecimals": 4, "maxLeverage": 25},
            {"name": "FRIEND", "szDecimals": 0, "maxLeverage": 3, "onlyIsolated": True},
        ]
    }


@pytest.fixture
def vault():
    """A parent vault with two followers and portfolio history."""
    return {
        "name": "Hyperliquidity Provider (HLP)",
        "vaultAddress": VAULT,
        "leader": "0x677d831aef5328190852e24f13c46cac05f984e7",
        "description": "Community-owned market making vault",
        "portfolio": [
            ["day", {
                "accountValueHistory": [[1733875200000, "100.0"]],
                "pnlHistory": [[1733875200000, "1.5"]],
                "vlm": "12345.6",
            }],
            ["allTime", {
                "accountValueHistory": [[1700000000000, "50.0"]],
            }],
        ],
        "apr": 0.21,
        "followerState": None,
        "leaderFraction": 0.1,
        "leaderCommission": 0,
        "followers": [
            {
                "user": "0x" + "11" * 20,
                "vaultEquity": "1000.5",
                "pnl": "20.25",
                "allTimePnl": "100.0",
                "daysFollowing": 10,
                "vaultEntryTime": 1700000000000,
                "lockupUntil": 1700100000000,
            },
            {
                "user": "0x" + "22" * 20,
                "vaultEquity": "499.5",
                "pnl": "-5.25",
                "allTimePnl": "-20.0",
                "daysFollowing": 20,
                "vaultEntryTime": 1700000000000,
                "lockupUntil": 1700100000000,
            },
        ],
        "maxDistributable": 0,
        "maxWithdrawable": 0,
        "isClosed": False,
        "relationship": {
            "type": "parent",
            "data": {
                "childAddresses": [
                    "0x010461c14e146ac35fe42271bdc1134ee31c703a",
                    "0x31ca8395cf837de08b24da3f660e77761dfb974b",
                ]
            },
        },
        "allowDeposits": True,
        "alwaysCloseOnWithdraw": False,
    }
