"""MCP tool registration for searching and reading the documentation bundle."""

import logging
from typing import Annotated, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from .knowledge.bundle import DocsBundle
from .knowledge.retriever import DEFAULT_LIMIT, format_page, format_search_results, read_doc, search_docs

logger = logging.getLogger(__name__)

LibraryName = Literal["WPILib", "CTRE Phoenix 6", "REV Robotics", "Limelight", "AdvantageKit"]


def register_docs_tools(mcp: FastMCP, bundle: DocsBundle) -> None:
	"""Register search_frc_docs and read_documentation."""

	@mcp.tool()
	async def search_frc_docs(
		query: Annotated[str, Field(description="Search query (e.g., 'PIDController', 'swerve drive', 'motor configuration')")],
		library: Annotated[Optional[LibraryName], Field(description="Filter results to a specific library")] = None,
		limit: Annotated[int, Field(ge=1, le=50, description="Maximum number of results to return (default: 10)")] = DEFAULT_LIMIT,
	) -> str:
		"""
		Search FRC documentation across WPILib, CTRE Phoenix 6, REV Robotics, Limelight, and AdvantageKit.

		Returns matching pages with relevance scores and snippets.
		"""
		try:
			results = search_docs(bundle, query, library, limit)
		except Exception as e:
			logger.error(f"Search error for {query!r}: {e}")
			return f'Search failed for "{query}": {e}'
		return format_search_results(results, query, library)

	@mcp.tool()
	async def read_documentation(
		id: Annotated[str, Field(description="The page ID (from search results)")],
	) -> str:
		"""
		Read the full content of a specific FRC documentation page by its ID.

		Use search_frc_docs first to find the page ID.
		"""
		return format_page(read_doc(bundle, id), id)
