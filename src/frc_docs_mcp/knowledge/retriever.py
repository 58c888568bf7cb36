"""
Documentation Retriever - search and read over a loaded bundle.

Ranking comes from the bundle's SearchIndex; library filtering and the
result limit are applied afterwards, and snippets are cut from the stored
page content at query time.
"""

import logging
from typing import Optional

from ..constants import UNTITLED
from ..models import Page, SearchResult
from .bundle import SEARCH_OPTIONS, DocsBundle

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
SNIPPET_BEFORE = 80
SNIPPET_AFTER = 120
SNIPPET_FALLBACK = 200


def make_snippet(content: str, query: str) -> str:
	"""
	Cut a snippet around the first case-insensitive occurrence of query.

	Falls back to the start of the content when the literal query does not
	occur (e.g. the page matched through fuzzy or prefix terms).
	"""
	idx = content.lower().find(query.lower()) if query else -1
	if idx == -1:
		return content[:SNIPPET_FALLBACK].strip() + "..."

	start = max(0, idx - SNIPPET_BEFORE)
	end = min(len(content), idx + len(query) + SNIPPET_AFTER)
	snippet = content[start:end].strip()
	if start > 0:
		snippet = "..." + snippet
	if end < len(content):
		snippet += "..."
	return snippet


def search_docs(
	bundle: DocsBundle,
	query: str,
	library: Optional[str] = None,
	limit: int = DEFAULT_LIMIT,
) -> list[SearchResult]:
	"""
	Relevance-ranked search with optional library filter.

	Args:
		bundle: Loaded documentation bundle
		query: Search text (e.g. "PIDController", "swerve drive")
		library: Keep only results from this library (applied after ranking)
		limit: Maximum number of results

	Returns:
		Results ordered by descending score
	"""
	if not query or not query.strip():
		return []

	hits = bundle.index.search(
		query,
		boost=SEARCH_OPTIONS["boost"],
		fuzzy=SEARCH_OPTIONS["fuzzy"],
		prefix=SEARCH_OPTIONS["prefix"],
	)
	if library:
		hits = [hit for hit in hits if hit.stored.get("library") == library]
	hits = hits[:max(0, limit)]

	results = []
	for hit in hits:
		page = bundle.pages.get(hit.id)
		results.append(SearchResult(
			id=hit.id,
			title=hit.stored.get("title") or UNTITLED,
			snippet=make_snippet(page.content, query) if page else "",
			url=hit.stored.get("url") or "",
			library=hit.stored.get("library") or "",
			score=hit.score,
		))
	return results


def read_doc(bundle: DocsBundle, page_id: str) -> Optional[Page]:
	"""Exact id lookup. Returns None when the page does not exist."""
	return bundle.pages.get(page_id)


def format_search_results(results: list[SearchResult], query: str, library: Optional[str] = None) -> str:
	"""Render search results as the text block returned to the agent."""
	if not results:
		scope = f" in {library}" if library else ""
		return f'No results found for "{query}"{scope}.'

	entries = [
		f"{i}. **{r.title}** ({r.library})\n"
		f"   Score: {r.score:.2f} | ID: {r.id}\n"
		f"   URL: {r.url}\n"
		f"   {r.snippet}"
		for i, r in enumerate(results, start=1)
	]
	return f'Found {len(results)} result(s) for "{query}":\n\n' + "\n\n".join(entries)


def format_page(page: Optional[Page], page_id: str) -> str:
	"""Render a full page, or the not-found message."""
	if page is None:
		return f'No page found with ID "{page_id}". Use search_frc_docs to find valid page IDs.'
	return (
		f"# {page.title}\n\n"
		f"**Library:** {page.library}\n"
		f"**URL:** {page.url}\n"
		f"**Tokens:** ~{page.tokens}\n\n"
		f"---\n\n"
		f"{page.content}"
	)
