"""Shared HTTP helpers for discovery and extraction."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import aiohttp

from ..config import Config

logger = logging.getLogger(__name__)


@dataclass
class FetchedResource:
	"""A successfully fetched HTTP resource."""
	url: str
	status: int
	content_type: str
	text: str

	@property
	def is_html(self) -> bool:
		return "text/html" in self.content_type.lower()


def create_session(config: Config) -> aiohttp.ClientSession:
	"""Create a client session with the crawler's user agent and timeout."""
	return aiohttp.ClientSession(
		headers={"User-Agent": config.user_agent},
		timeout=aiohttp.ClientTimeout(total=config.request_timeout),
	)


async def fetch(session: aiohttp.ClientSession, url: str) -> Optional[FetchedResource]:
	"""
	Fetch a URL, best-effort.

	Returns None (and logs why) on network errors, timeouts, or non-200
	responses instead of raising.
	"""
	try:
		async with session.get(url) as response:
			if response.status != 200:
				logger.warning(f"Failed to fetch {url}: HTTP {response.status}")
				return None
			text = await response.text()
			return FetchedResource(
				url=url,
				status=response.status,
				content_type=response.headers.get("Content-Type", ""),
				text=text,
			)
	except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
		logger.warning(f"Error fetching {url}: {e!r}")
		return None
