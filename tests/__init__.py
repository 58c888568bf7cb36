"""Test suite for frc-docs-mcp."""
