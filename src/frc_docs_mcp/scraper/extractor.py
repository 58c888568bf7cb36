"""
Content Extractor - Converts documentation pages to markdown with Gemini.

Pages are fetched, stripped of site chrome with BeautifulSoup, and handed to
Gemini with a fixed conversion prompt. Work runs in throttled batches; a
page that fails at any step is logged and left out.
"""

import logging
import re
from typing import Any, Optional
from urllib.parse import urlparse

import aiohttp
from bs4 import BeautifulSoup
from google import genai
from google.genai import errors as genai_errors

from ..config import Config, get_api_key
from ..constants import UNTITLED, Library
from ..errors import ConversionError, FetchError
from ..models import Page, url_to_id
from .batch import BatchProcessor
from .fetch import create_session, fetch

logger = logging.getLogger(__name__)

MIN_BODY_CHARS = 100
MAX_HTML_CHARS = 100_000

# Elements removed before conversion
REMOVE_TAGS = ["script", "style", "nav", "footer", "header"]

CONVERSION_PROMPT = """Convert the following HTML documentation page into clean Markdown.

Rules:
- Preserve all code blocks with their language tags.
- Preserve headers, tables, lists, and links.
- Keep images inline using their original absolute image URLs.
- Remove any remaining navigation, sidebars, footers, cookie banners, and other site chrome.
- Output only the Markdown content. Do not wrap the output in a code fence.

HTML:
"""

_FENCE = re.compile(r"^```(?:markdown|md)?[ \t]*\n(.*)\n```\s*$", re.DOTALL)


def strip_boilerplate(page_html: str) -> str:
	"""Remove chrome elements and return the main content container's HTML."""
	soup = BeautifulSoup(page_html, "html.parser")
	for element in soup.find_all(REMOVE_TAGS):
		element.decompose()

	container = (
		soup.find("main")
		or soup.find("article")
		or soup.find(attrs={"role": "main"})
		or soup.body
		or soup
	)
	return str(container).strip()


def humanize_slug(url: str) -> str:
	"""Turn the last URL path segment into a title, e.g. 'swerve-drive.html' -> 'Swerve Drive'."""
	segments = [s for s in urlparse(url).path.split("/") if s]
	if not segments:
		return ""
	slug = re.sub(r"\.html?$", "", segments[-1])
	slug = re.sub(r"[-_]+", " ", slug).strip()
	return re.sub(r"\b\w", lambda m: m.group().upper(), slug)


def derive_title(markdown: str, url: str) -> str:
	"""Pick a page title: # heading, ## heading, leading bold text, URL slug, then 'Untitled'."""
	for pattern in (r"^#[ \t]+(.+)$", r"^##[ \t]+(.+)$", r"^\*\*(.+?)\*\*"):
		match = re.search(pattern, markdown, re.MULTILINE)
		if match and match.group(1).strip():
			return match.group(1).strip()
	return humanize_slug(url) or UNTITLED


def _strip_fence(text: str) -> str:
	match = _FENCE.match(text)
	return match.group(1).strip() if match else text


class ContentExtractor:
	"""
	Fetches pages and converts them to markdown via Gemini.

	Usage:
		extractor = ContentExtractor(config)
		pages = await extractor.extract(urls, Library.LIMELIGHT)
	"""

	def __init__(self, config: Config, client: Optional[Any] = None):
		"""
		Initialize the extractor.

		Args:
			config: Loaded configuration (model, batch size, delay, timeouts)
			client: Pre-built google-genai client; built from the environment key when omitted

		Raises:
			ConfigurationError: if no client is given and no API key is set
		"""
		self.config = config
		self.client = client if client is not None else genai.Client(api_key=get_api_key())

	async def extract(
		self,
		urls: list[str],
		library: Library | str,
		session: Optional[aiohttp.ClientSession] = None,
	) -> list[Page]:
		"""
		Convert every URL into a Page, skipping failures.

		Returns:
			Pages in completion order within each batch, batches in input order
		"""
		library_name = Library(library).value
		processor: BatchProcessor[str, Page] = BatchProcessor(
			batch_size=self.config.batch_size,
			delay=self.config.batch_delay,
		)

		owns_session = session is None
		active_session = session or create_session(self.config)

		async def handler(url: str) -> Page:
			return await self._process_url(active_session, url, library_name)

		try:
			summaries = await processor.run(urls, handler)
		finally:
			if owns_session:
				await active_session.close()

		pages = [page for summary in summaries for page in summary.results]
		logger.info(f"{library_name}: extracted {len(pages)} of {len(urls)} pages")
		return pages

	async def _process_url(self, session: aiohttp.ClientSession, url: str, library: str) -> Page:
		resource = await fetch(session, url)
		if resource is None:
			raise FetchError(f"Could not fetch {url}")
		if not resource.is_html:
			raise FetchError(f"{url} is not HTML ({resource.content_type or 'no content type'})")

		body = strip_boilerplate(resource.text)
		if len(body) < MIN_BODY_CHARS:
			raise ConversionError(f"{url} has too little content ({len(body)} chars)")

		markdown = await self.convert(body[:MAX_HTML_CHARS])
		if not markdown:
			raise ConversionError(f"Empty conversion for {url}")

		logger.debug(f"Converted {url} ({len(markdown)} chars)")
		return Page(
			id=url_to_id(url),
			title=derive_title(markdown, url),
			library=library,
			url=url,
			content=markdown,
		)

	async def convert(self, page_html: str) -> str:
		"""Ask Gemini to convert stripped HTML to markdown."""
		try:
			response = await self.client.aio.models.generate_content(
				model=self.config.gemini_model,
				contents=CONVERSION_PROMPT + page_html,
			)
		except genai_errors.APIError as e:
			raise ConversionError(f"Gemini request failed: {e}") from e
		return _strip_fence((response.text or "").strip())
