"""Test intelligence MCP server: discovery, impact selection, flakiness, coverage and health."""

__version__ = "0.1.0"
