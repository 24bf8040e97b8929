"""
Hyperliquid query service.

This module exposes one method per read-only query against the Hyperliquid
Info API. Every method converts failures into a sentinel (None for single
objects, an empty list for lists) and logs the error instead of raising.
"""

import logging
from typing import Dict, Any, List, Optional

from hyperliquid_mcp_server.client import InfoClient
from hyperliquid_mcp_server.config import HyperliquidConfig
from hyperliquid_mcp_server.utils import is_valid_address

logger = logging.getLogger(__name__)


# Hyperliquid's own venue in predictedFundings
HL_PERP_VENUE = "HlPerp"

MARKET_NOT_FOUND = -1


def find_market_index(universe: List[Dict[str, Any]], coin: str) -> int:
    """
    Locate a coin in the market universe, ignoring case.

    Returns:
        int: Position in the universe, or -1 if the coin is not listed
    """
    target = coin.lower()
    for index, asset in enumerate(universe):
        name = asset.get("name")
        if isinstance(name, str) and name.lower() == target:
            return index
    return MARKET_NOT_FOUND


def _position_coin(asset_position: Dict[str, Any]) -> Optional[str]:
    # clearinghouseState nests the coin under "position"; accept a flat "coin" too
    position = asset_position.get("position")
    if isinstance(position, dict) and position.get("coin"):
        return position["coin"]
    return asset_position.get("coin")


class HyperliquidService:
    """
    Read-only adapter over the Hyperliquid Info API.

    Instances are stateless apart from their config and HTTP session and
    can be shared between concurrent tool calls.
    """

    def __init__(self, config: Optional[HyperliquidConfig] = None, client: Optional[InfoClient] = None):
        self.config = config or (client.config if client else HyperliquidConfig())
        self.client = client or InfoClient(self.config)

    @property
    def is_testnet(self) -> bool:
        return self.config.testnet

    def close(self) -> None:
        self.client.close()

    # ------------------------------------------------------------------
    # Trader positions
    # ------------------------------------------------------------------

    def get_trader_positions(self, user_address: str) -> Optional[Dict[str, Any]]:
        """Get the clearinghouse state (margin summary and positions) for a trader."""
        try:
            return self.client.clearinghouse_state(user_address)
        except Exception as e:
            logger.error(f"Error fetching trader positions: {e}")
            return None

    def get_trader_position_for_market(self, user_address: str, coin: str) -> Optional[Dict[str, Any]]:
        """
        Get a trader's position for a single market.

        Args:
            user_address: Trader address (0x format)
            coin: Market symbol, matched case-insensitively

        Returns:
            The matching entry of ``assetPositions``, or None
        """
        try:
            user_state = self.get_trader_positions(user_address)
            if not user_state:
                return None

            target = coin.lower()
            for asset_position in user_state.get("assetPositions") or []:
                coin_name = _position_coin(asset_position)
                if isinstance(coin_name, str) and coin_name.lower() == target:
                    return asset_position
            return None
        except Exception as e:
            logger.error(f"Error fetching position for market: {e}")
            return None

    def get_open_orders(self, user_address: str) -> List[Dict[str, Any]]:
        try:
            return self.client.open_orders(user_address)
        except Exception as e:
            logger.error(f"Error fetching open orders: {e}")
            return []

    def get_user_fills(self, user_address: str) -> List[Dict[str, Any]]:
        try:
            return self.client.user_fills(user_address)
        except Exception as e:
            logger.error(f"Error fetching user fills: {e}")
            return []

    # ------------------------------------------------------------------
    # Markets
    # ------------------------------------------------------------------

    def get_markets(self) -> List[Dict[str, Any]]:
        """
        Get all perpetual markets.

        Returns:
            List of market descriptors:
            ``{"name", "szDecimals", "maxLeverage", "onlyIsolated"}``
        """
        try:
            meta = self.client.meta()
            return [
                {
                    "name": asset["name"],
                    "szDecimals": asset["szDecimals"],
                    "maxLeverage": asset["maxLeverage"],
                    "onlyIsolated": asset.get("onlyIsolated", False),
                }
                for asset in meta["universe"]
            ]
        except Exception as e:
            logger.error(f"Error fetching markets: {e}")
            return []

    def get_market_index(self, coin: str) -> int:
        """Position of a coin in the market universe, or -1."""
        try:
            meta = self.client.meta()
            return find_market_index(meta["universe"], coin)
        except Exception as e:
            logger.error(f"Error getting market index: {e}")
            return MARKET_NOT_FOUND

    def get_market_price(self, coin: str) -> Optional[str]:
        """
        Get the current mid price for a market.

        allMids may come back as an object keyed by coin or as a plain array
        aligned with the universe; both are handled.
        """
        try:
            all_mids = self.client.all_mids()
            meta = self.client.meta()
            universe = meta["universe"]
            market_index = find_market_index(universe, coin)
            if market_index == MARKET_NOT_FOUND:
                return None

            if isinstance(all_mids, dict):
                name = universe[market_index]["name"]
                if name in all_mids:
                    return all_mids[name] or None
                mids = list(all_mids.values())
            else:
                mids = list(all_mids)

            if market_index >= len(mids):
                return None
            return mids[market_index] or None
        except Exception as e:
            logger.error(f"Error fetching market price: {e}")
            return None

    def get_meta(self) -> Optional[Dict[str, Any]]:
        try:
            return self.client.meta()
        except Exception as e:
            logger.error(f"Error fetching meta: {e}")
            return None

    def get_all_mids(self) -> Any:
        try:
            return self.client.all_mids()
        except Exception as e:
            logger.error(f"Error fetching all mids: {e}")
            return []

    # ------------------------------------------------------------------
    # Funding
    # ------------------------------------------------------------------

    def get_funding_rates(self) -> Optional[List[Any]]:
        """Get ``[meta, assetCtxs]`` with the current funding context of every market."""
        try:
            return self.client.meta_and_asset_ctxs()
        except Exception as e:
            logger.error(f"Error fetching funding rates: {e}")
            return None

    def get_predicted_fundings(self) -> Optional[List[Any]]:
        try:
            return self.client.predicted_fundings()
        except Exception as e:
            logger.error(f"Error fetching predicted fundings: {e}")
            return None

    def get_market_funding_rate(self, coin: str) -> Optional[Dict[str, Any]]:
        """
        Get the current funding context for one market.

        Returns:
            Dict with ``coin`` (upper-cased), ``currentFunding``, ``premium``,
            ``markPrice`` and ``oraclePrice``, or None if the coin is unknown
        """
        try:
            meta_and_asset_ctxs = self.get_funding_rates()
            if not meta_and_asset_ctxs:
                return None

            meta, asset_ctxs = meta_and_asset_ctxs[0], meta_and_asset_ctxs[1]
            market_index = find_market_index(meta["universe"], coin)
            if market_index == MARKET_NOT_FOUND or market_index >= len(asset_ctxs):
                return None

            ctx = asset_ctxs[market_index]
            if not ctx:
                return None

            return {
                "coin": coin.upper(),
                "currentFunding": ctx.get("funding"),
                "premium": ctx.get("premium"),
                "markPrice": ctx.get("markPx"),
                "oraclePrice": ctx.get("oraclePx"),
            }
        except Exception as e:
            logger.error(f"Error fetching market funding rate: {e}")
            return None

    def get_next_funding_time(self, coin: str) -> Optional[Dict[str, Any]]:
        """
        Get the next funding time and predicted rate on Hyperliquid's own venue.

        predictedFundings is a list of ``[coin, [[venue, data], ...]]`` pairs.
        """
        try:
            predicted_fundings = self.get_predicted_fundings()
            if not predicted_fundings:
                return None

            target = coin.lower()
            venues = None
            for market_coin, market_venues in predicted_fundings:
                if market_coin.lower() == target:
                    venues = market_venues
                    break

            if venues is None:
                return None

            for venue_name, venue_data in venues:
                if venue_name == HL_PERP_VENUE:
                    if not venue_data:
                        return None
                    return {
                        "nextFundingTime": venue_data.get("nextFundingTime"),
                        "fundingRate": venue_data.get("fundingRate"),
                    }

            return None
        except Exception as e:
            logger.error(f"Error fetching next funding time: {e}")
            return None

    # ------------------------------------------------------------------
    # Vaults
    # ------------------------------------------------------------------

    def get_vault_details(self, vault_address: str, user_address: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Get detailed information about a vault.

        Args:
            vault_address: Vault address (0x format)
            user_address: Optional user, adds user-specific follower state

        Returns:
            Vault descriptor, or None
        """
        payload = {
            "type": "vaultDetails",
            "vaultAddress": vault_address,
        }
        if user_address:
            payload["user"] = user_address

        try:
            return self.client.post_info(payload)
        except Exception as e:
            logger.error(f"Error fetching vault details: {e}")
            return None

    def get_user_vault_equities(self, user_address: str) -> List[Dict[str, Any]]:
        """Get a user's vault deposits as ``[{"vaultAddress", "equity"}, ...]``."""
        try:
            vault_equities = self.client.post_info({"type": "userVaultEquities", "user": user_address})
            return vault_equities or []
        except Exception as e:
            logger.error(f"Error fetching user vault equities: {e}")
            return []

    def get_user_sub_accounts(self, user_address: str) -> List[Dict[str, Any]]:
        try:
            sub_accounts = self.client.post_info({"type": "subAccounts", "user": user_address})
            return sub_accounts or []
        except Exception as e:
            logger.error(f"Error fetching user sub accounts: {e}")
            return []

    def is_valid_vault_address(self, address: str) -> bool:
        """Check that an address is well formed and resolves to a vault."""
        if not is_valid_address(address):
            return False
        return self.get_vault_details(address) is not None


class HyperliquidServices:
    """
    The mainnet and testnet services, plus which one tools should use.

    The MCP server is bound to ``default`` only; the other instance serves
    library callers such as the demo script, which pick a network per call.
    """

    def __init__(self, mainnet: HyperliquidService, testnet: HyperliquidService, use_testnet: bool = False):
        self.mainnet = mainnet
        self.testnet = testnet
        self.use_testnet = use_testnet

    @property
    def default(self) -> HyperliquidService:
        return self.testnet if self.use_testnet else self.mainnet

    def close(self) -> None:
        """Close the HTTP sessions of both services."""
        self.mainnet.close()
        self.testnet.close()


def create_services(use_testnet: Optional[bool] = None, timeout: Optional[float] = None) -> HyperliquidServices:
    """
    Build the mainnet and testnet services.

    Args:
        use_testnet: Make testnet the default network. Falls back to the
            HYPERLIQUID_TESTNET environment variable.
        timeout: Request timeout in seconds, defaults to HYPERLIQUID_HTTP_TIMEOUT

    Returns:
        HyperliquidServices holding both instances
    """
    if use_testnet is None:
        use_testnet = HyperliquidConfig().testnet

    mainnet = HyperliquidService(HyperliquidConfig(testnet=False, timeout=timeout))
    testnet = HyperliquidService(HyperliquidConfig(testnet=True, timeout=timeout))

    logger.info(f"Hyperliquid services created (default network: {'testnet' if use_testnet else 'mainnet'})")
    return HyperliquidServices(mainnet, testnet, use_testnet)
