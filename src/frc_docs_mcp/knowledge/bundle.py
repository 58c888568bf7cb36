"""
Documentation bundle - the single persisted artifact.

Layout: {"pages": [...], "index": <SearchIndex.to_dict()>, "metadata": {...}}.
Only SearchIndex reads or writes the "index" value.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from ..constants import LIBRARY_NAMES
from ..errors import PersistenceError
from ..models import Page
from .index import SearchIndex

logger = logging.getLogger(__name__)

INDEX_FIELDS = ("title", "content")
STORE_FIELDS = ("title", "url", "library")
SEARCH_OPTIONS: dict[str, Any] = {
	"boost": {"title": 3},
	"fuzzy": 0.2,
	"prefix": True,
}

MISSING_BUNDLE_HINT = "Run `frc-docs-mcp scrape` first to generate the documentation bundle."


@dataclass
class DocsBundle:
	"""In-memory bundle for serving. Treated as read-only after load."""
	index: SearchIndex
	pages: dict[str, Page]
	metadata: dict[str, Any]


def new_index() -> SearchIndex:
	return SearchIndex(fields=INDEX_FIELDS, store_fields=STORE_FIELDS, search_options=SEARCH_OPTIONS)


def compute_metadata(pages: list[Page]) -> dict[str, Any]:
	"""Aggregate counts; library counts partition pages exactly."""
	counts: dict[str, int] = {name: 0 for name in LIBRARY_NAMES}
	for page in pages:
		counts[page.library] = counts.get(page.library, 0) + 1

	return {
		"generatedAt": datetime.now(timezone.utc).isoformat(),
		"totalPages": len(pages),
		"totalTokens": sum(page.tokens for page in pages),
		"libraries": [{"name": name, "pages": count} for name, count in counts.items()],
	}


def build_bundle(pages: Iterable[Page]) -> dict[str, Any]:
	"""Index pages and assemble the serializable bundle."""
	pages = list(pages)

	seen: set[str] = set()
	for page in pages:
		if page.id in seen:
			logger.warning(f"Duplicate page id {page.id!r} ({page.url}); last one wins on load")
		seen.add(page.id)

	index = new_index()
	index.add_all(pages)

	return {
		"pages": [page.to_dict() for page in pages],
		"index": index.to_dict(),
		"metadata": compute_metadata(pages),
	}


def write_bundle(path: Path, pages: Iterable[Page]) -> dict[str, Any]:
	"""Build the bundle and write it to path (overwriting). Returns the bundle dict."""
	bundle = build_bundle(pages)
	payload = json.dumps(bundle, ensure_ascii=False, separators=(",", ":"))

	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(payload, encoding="utf-8")

	metadata = bundle["metadata"]
	logger.info(f"Bundle written to {path}")
	logger.info(f"Total size: {len(payload.encode('utf-8')) / 1024 / 1024:.2f} MB")
	logger.info(f"Total tokens: {metadata['totalTokens']:,}")
	for lib in metadata["libraries"]:
		logger.info(f"  {lib['name']}: {lib['pages']} pages")
	return bundle


def read_bundle_data(path: Path) -> dict[str, Any]:
	"""
	Read and minimally validate the raw bundle JSON.

	Raises:
		PersistenceError: if the file is missing, unreadable, or malformed
	"""
	try:
		data = json.loads(path.read_text(encoding="utf-8"))
	except FileNotFoundError as e:
		raise PersistenceError(f"No documentation bundle at {path}. {MISSING_BUNDLE_HINT}") from e
	except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
		raise PersistenceError(f"Could not read bundle {path}: {e}. {MISSING_BUNDLE_HINT}") from e

	if not isinstance(data, dict) or not all(key in data for key in ("pages", "index", "metadata")):
		raise PersistenceError(f"Bundle {path} is missing pages/index/metadata. {MISSING_BUNDLE_HINT}")
	return data


def load_bundle(path: Path) -> DocsBundle:
	"""
	Load the bundle into an id->page map and a rehydrated search index.

	Raises:
		PersistenceError: if the bundle is missing or corrupt
	"""
	logger.info(f"Loading docs from {path}")
	data = read_bundle_data(path)

	try:
		index = SearchIndex.from_dict(data["index"], search_options=SEARCH_OPTIONS)
		pages = {}
		for raw in data["pages"]:
			page = Page.from_dict(raw)
			pages[page.id] = page
	except (ValueError, KeyError, TypeError) as e:
		raise PersistenceError(f"Bundle {path} is corrupt: {e}. {MISSING_BUNDLE_HINT}") from e

	logger.info(f"Loaded {len(pages)} pages, index ready")
	return DocsBundle(index=index, pages=pages, metadata=data["metadata"])
