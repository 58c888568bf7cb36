"""
URL Discovery - Finds every documentation page URL for a library.

Strategies (fixed per library):
- Sphinx search index: unwrap searchindex.js and read the document names
- Sitemap: sitemap.xml, including sitemap indexes with child sitemaps
- Recursive crawl: same-origin breadth-first link walk (fallback only)
"""

import html
import json
import logging
import re
from collections import deque
from enum import Enum
from typing import Optional
from urllib.parse import urldefrag, urljoin, urlparse

import aiohttp
from bs4 import BeautifulSoup

from ..constants import BASE_URLS, Library
from ..errors import DiscoveryError, ParseError
from .fetch import fetch

logger = logging.getLogger(__name__)


class DiscoveryStrategy(str, Enum):
	"""How URLs are discovered for a library."""
	SEARCH_INDEX = "search_index"
	SITEMAP = "sitemap"


DISCOVERY_STRATEGIES: dict[Library, DiscoveryStrategy] = {
	Library.WPILIB: DiscoveryStrategy.SEARCH_INDEX,
	Library.CTRE_PHOENIX6: DiscoveryStrategy.SEARCH_INDEX,
	Library.ADVANTAGEKIT: DiscoveryStrategy.SITEMAP,
	Library.REV_ROBOTICS: DiscoveryStrategy.SITEMAP,
	Library.LIMELIGHT: DiscoveryStrategy.SITEMAP,
}

SEARCH_INDEX_PATH = "searchindex.js"
SITEMAP_PATH = "sitemap.xml"
FALLBACK_CRAWL_DEPTH = 3

# Links to these are never crawled
ASSET_EXTENSIONS = (
	".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico",
	".pdf", ".zip", ".gz", ".tar",
	".css", ".js", ".json", ".xml",
	".woff", ".woff2", ".ttf", ".eot",
	".mp4", ".webm", ".mp3",
)

_WRAPPER = re.compile(r"^\s*[A-Za-z_$][\w$.]*\((.*)\)\s*;?\s*$", re.DOTALL)
_SITEMAP_ENTRY = re.compile(r"<sitemap\b[^>]*>(.*?)</sitemap>", re.DOTALL | re.IGNORECASE)
_LOC = re.compile(r"<loc>\s*(.*?)\s*</loc>", re.DOTALL | re.IGNORECASE)


def parse_search_index(text: str, base_url: str) -> list[str]:
	"""
	Extract page URLs from a Sphinx searchindex.js payload.

	The file looks like ``Search.setIndex({...})``; the JSON inside carries
	the page list under "docnames" (or "filenames" in some builds).

	Raises:
		ParseError: if the wrapper doesn't match, the JSON is invalid, or no names are present
	"""
	match = _WRAPPER.match(text)
	if not match:
		raise ParseError("Search index is not wrapped in a recognised Identifier(...) call")

	try:
		data = json.loads(match.group(1))
	except json.JSONDecodeError as e:
		raise ParseError(f"Search index payload is not valid JSON: {e}") from e

	names = []
	if isinstance(data, dict):
		names = data.get("docnames") or data.get("filenames") or []
	if not names:
		raise ParseError("Search index contains no document names")

	base = base_url.rstrip("/")
	urls = []
	for name in names:
		stem = re.sub(r"\.(?:html|rst|md|txt)$", "", str(name))
		urls.append(f"{base}/{stem}.html")
	return urls


def parse_sitemap(text: str) -> tuple[list[str], list[str]]:
	"""
	Parse a sitemap document.

	Returns:
		Tuple of (child sitemap URLs, all <loc> URLs). The first list is
		non-empty only for sitemap indexes.
	"""
	children = []
	for entry in _SITEMAP_ENTRY.findall(text):
		loc = _LOC.search(entry)
		if loc:
			children.append(html.unescape(loc.group(1)))
	locs = [html.unescape(loc) for loc in _LOC.findall(text)]
	return children, locs


def _origin(url: str) -> str:
	parsed = urlparse(url)
	return f"{parsed.scheme}://{parsed.netloc}".lower()


def extract_links(page_html: str, page_url: str, origin: Optional[str] = None) -> list[str]:
	"""
	Extract crawlable same-origin links from an HTML page.

	Fragment-only, mailto:, javascript: and asset links are dropped;
	fragments are stripped from the rest.
	"""
	origin = origin or _origin(page_url)
	soup = BeautifulSoup(page_html, "html.parser")

	links: list[str] = []
	seen: set[str] = set()
	for a_tag in soup.find_all("a", href=True):
		href = a_tag["href"].strip()
		if not href or href.startswith("#"):
			continue
		if href.lower().startswith(("mailto:", "javascript:")):
			continue

		url, _ = urldefrag(urljoin(page_url, href))
		if _origin(url) != origin:
			continue
		if urlparse(url).path.lower().endswith(ASSET_EXTENSIONS):
			continue
		if url not in seen:
			seen.add(url)
			links.append(url)
	return links


class UrlDiscoverer:
	"""
	Discovers documentation URLs for a library.

	Usage:
		async with create_session(config) as session:
			urls = await UrlDiscoverer(session).discover(Library.LIMELIGHT)
	"""

	def __init__(self, session: aiohttp.ClientSession):
		self.session = session

	async def discover(self, library: Library | str) -> list[str]:
		"""
		Return every document URL for the library.

		Raises:
			DiscoveryError: if no strategy produced any URL
		"""
		library = Library(library)
		base_url = BASE_URLS[library]
		strategy = DISCOVERY_STRATEGIES.get(library)
		if strategy is None:
			raise DiscoveryError(f"No discovery strategy configured for {library.value}")

		if strategy is DiscoveryStrategy.SEARCH_INDEX:
			urls = await self.from_search_index(base_url)
		else:
			urls = await self.from_sitemap(base_url)

		urls = list(dict.fromkeys(urls))
		if not urls:
			raise DiscoveryError(f"No documentation URLs found for {library.value} ({base_url})")

		logger.info(f"{library.value}: discovered {len(urls)} URLs via {strategy.value}")
		return urls

	async def from_search_index(self, base_url: str) -> list[str]:
		"""Read page names from searchindex.js, crawling if it is unusable."""
		index_url = f"{base_url.rstrip('/')}/{SEARCH_INDEX_PATH}"
		resource = await fetch(self.session, index_url)
		if resource is None:
			logger.warning(f"Search index unreachable at {index_url}, falling back to crawl")
			return await self.crawl(base_url, FALLBACK_CRAWL_DEPTH)

		try:
			return parse_search_index(resource.text, base_url)
		except ParseError as e:
			logger.warning(f"Search index at {index_url} unusable ({e}), falling back to crawl")
			return await self.crawl(base_url, FALLBACK_CRAWL_DEPTH)

	async def from_sitemap(self, base_url: str) -> list[str]:
		"""Collect <loc> URLs from sitemap.xml, following sitemap indexes."""
		sitemap_url = f"{base_url.rstrip('/')}/{SITEMAP_PATH}"
		urls: list[str] = []

		resource = await fetch(self.session, sitemap_url)
		if resource is not None:
			children, locs = parse_sitemap(resource.text)
			if children:
				logger.info(f"Sitemap index at {sitemap_url} lists {len(children)} child sitemaps")
				for child_url in children:
					child = await fetch(self.session, child_url)
					if child is None:
						logger.warning(f"Skipping unreachable child sitemap {child_url}")
						continue
					_, child_locs = parse_sitemap(child.text)
					urls.extend(child_locs)
			else:
				urls = locs

		if not urls:
			logger.warning(f"Sitemap at {sitemap_url} unreachable or empty, falling back to crawl")
			return await self.crawl(base_url, FALLBACK_CRAWL_DEPTH)
		return urls

	async def crawl(self, start_url: str, max_depth: int = FALLBACK_CRAWL_DEPTH) -> list[str]:
		"""
		Breadth-first same-origin crawl.

		Each URL is fetched at most once. Only HTML pages are parsed for links,
		and links are followed only from pages shallower than max_depth.

		Returns:
			URLs of HTML pages fetched successfully, in visit order
		"""
		origin = _origin(start_url)
		start, _ = urldefrag(start_url)

		visited: set[str] = set()
		queued: set[str] = {start}
		queue: deque[tuple[str, int]] = deque([(start, 0)])
		found: list[str] = []

		while queue:
			url, depth = queue.popleft()
			if url in visited:
				continue
			visited.add(url)

			resource = await fetch(self.session, url)
			if resource is None or not resource.is_html:
				continue
			found.append(url)

			if depth >= max_depth:
				continue
			for link in extract_links(resource.text, url, origin):
				if link not in visited and link not in queued:
					queued.add(link)
					queue.append((link, depth + 1))

		logger.info(f"Crawl of {start_url} visited {len(visited)} URLs, {len(found)} HTML pages")
		return found
