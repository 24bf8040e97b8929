"""
Unit tests for the Hyperliquid MCP tools.

Tests cover:
- Address validation before any service call
- JSON text serialization of results and sentinels
- Not-found and unexpected errors surfaced as ToolErrors
- Tool registration on the FastMCP server
"""

import json
import asyncio
import pytest
from unittest.mock import Mock, patch

from fastmcp import Client
from fastmcp.exceptions import ToolError

from hyperliquid_mcp_server import tools
from hyperliquid_mcp_server import server
from hyperliquid_mcp_server.server import create_server
from hyperliquid_mcp_server.service import HyperliquidService


TRADER = "0x" + "ab" * 20
VAULT = "0xdfc24b077bc1425AD1DEA75bCB6f8158E10Df303"

EXPECTED_TOOLS = {
    "HYPERLIQUID_getTraderPositions",
    "HYPERLIQUID_getTraderPositionForMarket",
    "HYPERLIQUID_getOpenOrders",
    "HYPERLIQUID_getUserFills",
    "HYPERLIQUID_getMarkets",
    "HYPERLIQUID_getMarketPrice",
    "HYPERLIQUID_getMeta",
    "HYPERLIQUID_getAllMids",
    "HYPERLIQUID_getFundingRates",
    "HYPERLIQUID_getPredictedFundings",
    "HYPERLIQUID_getMarketFundingRate",
    "HYPERLIQUID_getNextFundingTime",
    "HYPERLIQUID_getVaultDetails",
    "HYPERLIQUID_getUserVaultEquities",
    "HYPERLIQUID_getUserSubAccounts",
    "HYPERLIQUID_calculateVaultMetrics",
    "HYPERLIQUID_getVaultPortfolioData",
    "HYPERLIQUID_isValidVaultAddress",
    "HYPERLIQUID_getVaultStrategies",
}


@pytest.fixture
def mock_service():
    """A HyperliquidService double."""
    return Mock(spec=HyperliquidService)


class TestPositionTools:
    """Test trader position tools."""

    def test_invalid_address_rejected_before_call(self, mock_service):
        """Test a malformed address raises without touching the service."""
        with pytest.raises(ToolError, match="Invalid address format"):
            tools.get_trader_positions(mock_service, "0x123")
        mock_service.get_trader_positions.assert_not_called()

    def test_positions_serialized(self, mock_service):
        """Test the clearinghouse state is returned as indented JSON."""
        mock_service.get_trader_positions.return_value = {"assetPositions": []}

        text = tools.get_trader_positions(mock_service, TRADER)

        assert json.loads(text) == {"assetPositions": []}
        assert "\n  " in text

    def test_position_for_market_none(self, mock_service):
        """Test a missing position serializes to null."""
        mock_service.get_trader_position_for_market.return_value = None

        text = tools.get_trader_position_for_market(mock_service, TRADER, "ETH")

        assert text == "null"
        mock_service.get_trader_position_for_market.assert_called_once_with(TRADER, "ETH")

    def test_open_orders_invalid_address(self, mock_service):
        """Test open orders validates the address."""
        with pytest.raises(ToolError):
            tools.get_open_orders(mock_service, "not-an-address")

    def test_user_fills_empty(self, mock_service):
        """Test an empty fills list serializes to []."""
        mock_service.get_user_fills.return_value = []
        assert json.loads(tools.get_user_fills(mock_service, TRADER)) == []

    def test_unexpected_error_names_tool(self, mock_service):
        """Test an unexpected exception becomes a ToolError with the tool name."""
        mock_service.get_trader_positions.side_effect = RuntimeError("kaboom")

        with pytest.raises(ToolError) as exc_info:
            tools.get_trader_positions(mock_service, TRADER)

        assert str(exc_info.value) == "Error in HYPERLIQUID_getTraderPositions: kaboom"


class TestMarketTools:
    """Test market tools."""

    def test_market_price_wrapped(self, mock_service):
        """Test the price is wrapped with the requested coin."""
        mock_service.get_market_price.return_value = "97000.5"

        result = json.loads(tools.get_market_price(mock_service, "btc"))

        assert result == {"coin": "btc", "price": "97000.5"}

    def test_market_price_unknown(self, mock_service):
        """Test an unknown coin reports a null price."""
        mock_service.get_market_price.return_value = None
        assert json.loads(tools.get_market_price(mock_service, "DOGE")) == {"coin": "DOGE", "price": None}

    def test_markets(self, mock_service):
        """Test markets pass through."""
        markets = [{"name": "BTC", "szDecimals": 5, "maxLeverage": 40, "onlyIsolated": False}]
        mock_service.get_markets.return_value = markets
        assert json.loads(tools.get_markets(mock_service)) == markets

    def test_meta_none(self, mock_service):
        """Test a failed meta fetch serializes to null."""
        mock_service.get_meta.return_value = None
        assert tools.get_meta(mock_service) == "null"


class TestFundingTools:
    """Test funding tools."""

    def test_market_funding_rate(self, mock_service):
        """Test the funding snapshot passes through."""
        snapshot = {"coin": "ETH", "currentFunding": "0.00001", "premium": "0", "markPrice": "1", "oraclePrice": "1"}
        mock_service.get_market_funding_rate.return_value = snapshot
        assert json.loads(tools.get_market_funding_rate(mock_service, "eth")) == snapshot

    def test_next_funding_time_none(self, mock_service):
        """Test a missing venue serializes to null."""
        mock_service.get_next_funding_time.return_value = None
        assert tools.get_next_funding_time(mock_service, "ETH") == "null"


class TestVaultTools:
    """Test vault tools."""

    def test_vault_details_invalid_vault(self, mock_service):
        """Test a malformed vault address uses the vault message."""
        with pytest.raises(ToolError, match="Invalid vault address format"):
            tools.get_vault_details(mock_service, "0x123")

    def test_vault_details_invalid_user(self, mock_service):
        """Test a malformed optional user address uses the user message."""
        with pytest.raises(ToolError, match="Invalid user address format"):
            tools.get_vault_details(mock_service, VAULT, "0x123")
        mock_service.get_vault_details.assert_not_called()

    def test_vault_details_without_user(self, mock_service, vault):
        """Test vault details without a user address."""
        mock_service.get_vault_details.return_value = vault

        result = json.loads(tools.get_vault_details(mock_service, VAULT))

        assert result["name"] == vault["name"]
        mock_service.get_vault_details.assert_called_once_with(VAULT, None)

    def test_vault_details_with_user(self, mock_service, vault):
        """Test the user address is forwarded."""
        mock_service.get_vault_details.return_value = vault
        tools.get_vault_details(mock_service, VAULT, TRADER)
        mock_service.get_vault_details.assert_called_once_with(VAULT, TRADER)

    def test_metrics(self, mock_service, vault):
        """Test metrics are derived from the fetched vault."""
        mock_service.get_vault_details.return_value = vault

        result = json.loads(tools.calculate_vault_metrics(mock_service, VAULT))

        assert result["totalFollowers"] == 2
        assert result["totalEquity"] == 1500.0

    def test_metrics_unparseable_equity_is_strict_json(self, mock_service, vault):
        """Test a NaN sum reaches the client as null, not a bare NaN token."""
        vault["followers"][0]["vaultEquity"] = "n/a"
        mock_service.get_vault_details.return_value = vault

        def reject_constant(name):
            raise ValueError(f"non-standard JSON constant: {name}")

        text = tools.calculate_vault_metrics(mock_service, VAULT)
        result = json.loads(text, parse_constant=reject_constant)

        assert result["totalEquity"] is None
        assert result["totalPnl"] == 15.0

    def test_metrics_vault_not_found(self, mock_service):
        """Test a missing vault is reported as an error."""
        mock_service.get_vault_details.return_value = None

        with pytest.raises(ToolError) as exc_info:
            tools.calculate_vault_metrics(mock_service, VAULT)

        assert str(exc_info.value) == "Error: Vault not found or invalid vault address."

    def test_portfolio_data(self, mock_service, vault):
        """Test portfolio data keyed by period."""
        mock_service.get_vault_details.return_value = vault
        result = json.loads(tools.get_vault_portfolio_data(mock_service, VAULT))
        assert result["day"]["volume"] == "12345.6"

    def test_strategies(self, mock_service, vault):
        """Test the strategies summary."""
        mock_service.get_vault_details.return_value = vault

        result = json.loads(tools.get_vault_strategies(mock_service, VAULT))

        assert result["vaultAddress"] == VAULT
        assert result["hasStrategies"] is True
        assert result["strategiesCount"] == 2

    def test_strategies_non_parent(self, mock_service, vault):
        """Test a non-parent vault has no strategies."""
        vault["relationship"] = {"type": "normal"}
        mock_service.get_vault_details.return_value = vault

        result = json.loads(tools.get_vault_strategies(mock_service, VAULT))

        assert result["strategies"] == []
        assert result["hasStrategies"] is False
        assert result["strategiesCount"] == 0

    def test_is_valid_vault_address(self, mock_service):
        """Test the validity check is wrapped with the address."""
        mock_service.is_valid_vault_address.return_value = False

        result = json.loads(tools.is_valid_vault_address(mock_service, "0x123"))

        assert result == {"address": "0x123", "isValidVault": False}

    def test_user_vault_equities_invalid(self, mock_service):
        """Test vault equities validates the user address."""
        with pytest.raises(ToolError, match="Invalid address format"):
            tools.get_user_vault_equities(mock_service, "abc")

    def test_user_sub_accounts(self, mock_service):
        """Test subaccounts pass through."""
        mock_service.get_user_sub_accounts.return_value = []
        assert tools.get_user_sub_accounts(mock_service, TRADER) == "[]"


class TestServer:
    """Test the FastMCP server wiring."""

    def test_all_tools_registered(self, mock_service):
        """Test every Hyperliquid tool is registered by name."""
        mcp = create_server(mock_service)

        registered = asyncio.run(mcp.get_tools())

        assert set(registered) == EXPECTED_TOOLS

    def test_call_tool_success(self, mock_service):
        """Test a tool call returns the JSON text payload."""
        mock_service.get_market_funding_rate.return_value = {"coin": "ETH"}
        mcp = create_server(mock_service)

        async def call():
            async with Client(mcp) as client:
                return await client.call_tool(
                    "HYPERLIQUID_getMarketFundingRate", {"coin": "eth"}, raise_on_error=False
                )

        result = asyncio.run(call())

        assert result.is_error is False
        assert json.loads(result.content[0].text) == {"coin": "ETH"}

    def test_call_tool_invalid_address_is_error(self, mock_service):
        """Test a malformed address comes back flagged as an error."""
        mcp = create_server(mock_service)

        async def call():
            async with Client(mcp) as client:
                return await client.call_tool(
                    "HYPERLIQUID_getTraderPositions", {"userAddress": "0x123"}, raise_on_error=False
                )

        result = asyncio.run(call())

        assert result.is_error is True
        assert "Invalid address format" in result.content[0].text
        mock_service.get_trader_positions.assert_not_called()


class TestMain:
    """Test the command line entry point."""

    @pytest.fixture
    def services(self, mock_service):
        services = Mock()
        services.default = mock_service
        return services

    def run_main(self, argv, services, mcp):
        with patch('sys.argv', ['hyperliquid-mcp-server'] + argv), \
                patch.object(server, 'load_dotenv'), \
                patch.object(server, 'create_services', return_value=services) as create, \
                patch.object(server, 'create_server', return_value=mcp) as build:
            server.main()
        return create, build

    def test_stdio_run_closes_services(self, services):
        """Test the default service is served and sessions are closed after the run."""
        mcp = Mock()

        create, build = self.run_main(['--testnet'], services, mcp)

        assert create.call_args.kwargs["use_testnet"] is True
        build.assert_called_once_with(services.default)
        mcp.run.assert_called_once_with(transport="stdio")
        services.close.assert_called_once_with()

    def test_http_transport_options(self, services):
        """Test host and port are passed to HTTP transports."""
        mcp = Mock()

        self.run_main(['--transport', 'sse', '--host', '0.0.0.0', '--port', '9000'], services, mcp)

        mcp.run.assert_called_once_with(transport="sse", host="0.0.0.0", port=9000)

    def test_server_error_exits_84(self, services):
        """Test a server failure exits with code 84 and still closes sessions."""
        mcp = Mock()
        mcp.run.side_effect = RuntimeError("address in use")

        with pytest.raises(SystemExit) as exc_info:
            self.run_main([], services, mcp)

        assert exc_info.value.code == 84
        services.close.assert_called_once_with()

    def test_keyboard_interrupt_is_clean_shutdown(self, services):
        """Test Ctrl+C ends the server without an error exit."""
        mcp = Mock()
        mcp.run.side_effect = KeyboardInterrupt

        self.run_main([], services, mcp)

        services.close.assert_called_once_with()

    def test_invalid_timeout_exits_1(self, services):
        """Test a non-positive timeout stops before any service is built."""
        with patch.dict('os.environ', {'HYPERLIQUID_HTTP_TIMEOUT': '0'}):
            with pytest.raises(SystemExit) as exc_info:
                self.run_main([], services, Mock())

        assert exc_info.value.code == 1
        services.close.assert_not_called()
