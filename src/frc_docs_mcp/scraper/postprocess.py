"""
Bundle repair - fixes quality issues in docs.json without re-scraping.

Idempotent: running it twice leaves the bundle unchanged apart from
generatedAt.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from ..constants import UNTITLED, Library
from ..errors import PersistenceError
from ..knowledge.bundle import read_bundle_data, write_bundle
from ..models import Page
from .extractor import derive_title

logger = logging.getLogger(__name__)

SEARCH_PLACEHOLDER_TITLE = "Search the documentation"
FORM_PAGE_MAX_TOKENS = 200
STUB_MAX_TOKENS = 60

_ORPHAN = re.compile(r"^:orphan:\s*\n*")
_NOT_FOUND_TITLE = re.compile(r"page not found", re.IGNORECASE)
_NOT_FOUND_HEADING = re.compile(r"^#\s+page not found", re.IGNORECASE | re.MULTILINE)
_PATH_LINE = re.compile(r"^[\w/-]+$")


@dataclass
class RepairStats:
	"""Counts from one repair run."""
	original_pages: int = 0
	final_pages: int = 0
	fixed_titles: int = 0
	removed_junk: int = 0
	removed_stubs: int = 0
	cleaned_orphan: int = 0
	still_untitled: list[str] = field(default_factory=list)


def is_junk_page(page: Page) -> bool:
	"""404 pages, search placeholders, and failed conversions that kept a raw form."""
	if _NOT_FOUND_TITLE.search(page.title):
		return True
	if _NOT_FOUND_HEADING.search(page.content):
		return True
	if page.title == SEARCH_PLACEHOLDER_TITLE:
		return True
	if "<form" in page.content and page.tokens < FORM_PAGE_MAX_TOKENS:
		return True
	return False


def is_toctree_stub(page: Page) -> bool:
	"""WPILib pages that are only a heading plus a toctree path listing."""
	if page.library != Library.WPILIB.value or page.tokens >= STUB_MAX_TOKENS:
		return False
	lines = [line.strip() for line in page.content.split("\n") if line.strip()]
	path_lines = [line for line in lines if _PATH_LINE.match(line)]
	return len(path_lines) > len(lines) * 0.5


def repair_pages(pages: list[Page], stats: RepairStats) -> list[Page]:
	"""Apply the cleanup rules and return the surviving pages."""
	cleaned: list[Page] = []
	for page in pages:
		if page.library == Library.WPILIB.value and page.content.startswith(":orphan:"):
			page.content = _ORPHAN.sub("", page.content).strip()
			stats.cleaned_orphan += 1
		page.refresh_tokens()

		if is_junk_page(page):
			logger.info(f'  Removing junk: "{page.title}" ({page.library})')
			stats.removed_junk += 1
			continue

		if is_toctree_stub(page):
			logger.info(f'  Removing stub: "{page.title}" ({page.library})')
			stats.removed_stubs += 1
			continue

		if page.title == UNTITLED:
			new_title = derive_title(page.content, page.url)
			if new_title != UNTITLED:
				page.title = new_title
				stats.fixed_titles += 1

		cleaned.append(page)
	return cleaned


def postprocess_bundle(path: Path) -> RepairStats:
	"""
	Reload the bundle at path, repair it, and rewrite it in place.

	Raises:
		PersistenceError: if the bundle is missing or corrupt
	"""
	logger.info(f"Loading {path}")
	data = read_bundle_data(path)
	try:
		pages = [Page.from_dict(raw) for raw in data["pages"]]
	except (KeyError, TypeError) as e:
		raise PersistenceError(f"Bundle {path} has malformed pages: {e}") from e

	stats = RepairStats(original_pages=len(pages))
	cleaned = repair_pages(pages, stats)
	stats.final_pages = len(cleaned)
	stats.still_untitled = [page.url for page in cleaned if page.title == UNTITLED]

	logger.info("=== Results ===")
	logger.info(f"Original pages: {stats.original_pages}")
	logger.info(f"Fixed titles: {stats.fixed_titles}")
	logger.info(f"Removed junk: {stats.removed_junk}")
	logger.info(f"Removed stubs: {stats.removed_stubs}")
	logger.info(f"Cleaned :orphan: markers: {stats.cleaned_orphan}")
	logger.info(f"Final pages: {stats.final_pages}")
	logger.info(f"Still untitled: {len(stats.still_untitled)}")
	for url in stats.still_untitled[:5]:
		logger.info(f"  - {url}")

	logger.info("Rebuilding search index...")
	write_bundle(path, cleaned)
	return stats
