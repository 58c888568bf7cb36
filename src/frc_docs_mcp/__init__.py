"""frc-docs-mcp: offline FRC documentation bundle served over MCP."""

__version__ = "1.0.0"
