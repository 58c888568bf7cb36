"""
Scraper module - Builds the documentation bundle.

Provides:
- rst_to_markdown: RST to Markdown conversion for the WPILib sources
- UrlDiscoverer: URL discovery via search index, sitemap, or crawl
- ContentExtractor: Gemini-assisted HTML to Markdown extraction
- scrape: the full ingestion pass
"""

from .crawler import UrlDiscoverer
from .extractor import ContentExtractor
from .pipeline import scrape
from .rst import rst_to_markdown

__all__ = [
	"UrlDiscoverer",
	"ContentExtractor",
	"scrape",
	"rst_to_markdown",
]
