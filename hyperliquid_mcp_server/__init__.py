"""
Hyperliquid MCP Server.

Read-only Model Context Protocol tools for the Hyperliquid Info API:
markets, trader positions, funding rates and vaults.
"""

__version__ = "1.0.0"
