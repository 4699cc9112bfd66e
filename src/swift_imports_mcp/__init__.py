"""Extract and index Swift import declarations, served over MCP."""

__version__ = "0.1.0"
