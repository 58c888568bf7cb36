"""Ingestion trigger - scrape every library and write the bundle."""

import logging
from typing import Optional

from ..config import Config
from ..constants import Library
from ..errors import DiscoveryError
from ..knowledge.bundle import write_bundle
from ..models import Page
from .crawler import UrlDiscoverer
from .extractor import ContentExtractor
from .fetch import create_session
from .source import extract_wpilib_docs

logger = logging.getLogger(__name__)


async def scrape(config: Config, extractor: Optional[ContentExtractor] = None) -> dict:
	"""
	Run the full ingestion pass and overwrite the bundle at config.bundle_path.

	WPILib pages come from the frc-docs RST sources; every other library goes
	through URL discovery and Gemini extraction. A library whose discovery
	fails is skipped without affecting the others.

	Raises:
		ConfigurationError: before any work, if the Gemini key is missing
	"""
	extractor = extractor or ContentExtractor(config)
	all_pages: list[Page] = []

	async with create_session(config) as session:
		discoverer = UrlDiscoverer(session)

		for library in Library:
			logger.info(f"=== Processing {library.value} ===")
			try:
				if library is Library.WPILIB:
					logger.info("Extracting from GitHub repo (RST -> Markdown)...")
					pages = await extract_wpilib_docs(config)
				else:
					logger.info("Discovering URLs...")
					urls = await discoverer.discover(library)
					logger.info(f"Found {len(urls)} URLs")

					logger.info("Extracting content via Gemini...")
					pages = await extractor.extract(urls, library, session=session)
			except DiscoveryError as e:
				logger.error(f"{library.value}: skipped ({e})")
				continue

			all_pages.extend(pages)
			logger.info(f"{library.value}: {len(pages)} pages extracted")

	logger.info("=== Building index ===")
	logger.info(f"Total pages: {len(all_pages)}")
	return write_bundle(config.bundle_path, all_pages)
