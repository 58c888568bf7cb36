"""frc-docs-mcp MCP server."""

import logging

from mcp.server.fastmcp import FastMCP

from .config import Config
from .knowledge.bundle import DocsBundle, load_bundle
from .tools import register_docs_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "frc-docs-mcp"


def create_server(bundle: DocsBundle) -> FastMCP:
	"""Build a FastMCP server with the documentation tools bound to bundle."""
	mcp = FastMCP(SERVER_NAME)
	register_docs_tools(mcp, bundle)
	return mcp


def run_server(config: Config) -> None:
	"""
	Load the bundle and serve over stdio until the client disconnects.

	Raises:
		PersistenceError: if the bundle is missing or corrupt
	"""
	logger.info("Loading documentation bundle...")
	bundle = load_bundle(config.bundle_path)
	mcp = create_server(bundle)

	metadata = bundle.metadata
	logger.info(
		f"Loaded {metadata.get('totalPages', len(bundle.pages))} pages "
		f"({metadata.get('totalTokens', 0):,} tokens)"
	)
	logger.info("Starting MCP server over stdio...")
	mcp.run()
