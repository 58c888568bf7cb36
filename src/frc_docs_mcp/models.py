"""
Data model for documentation pages and search results.

A Page is created once during ingestion. The only sanctioned mutation is
the repair pass (see scraper.postprocess), which rewrites title/content and
must call refresh_tokens() afterwards.
"""

import math
import re
from dataclasses import asdict, dataclass
from typing import Any

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def estimate_tokens(text: str) -> int:
	"""Approximate token count: one token per four characters, rounded up."""
	return math.ceil(len(text) / 4)


def slugify_id(text: str) -> str:
	"""Collapse non-alphanumeric runs to '_' and trim separators."""
	return _NON_ALNUM.sub("_", text).strip("_")


def url_to_id(url: str) -> str:
	"""Derive a stable page id from a URL (scheme dropped)."""
	return slugify_id(re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", "", url))


@dataclass
class Page:
	"""One normalized unit of documentation content."""
	id: str
	title: str
	library: str
	url: str
	content: str
	tokens: int = 0

	def __post_init__(self) -> None:
		if not self.tokens:
			self.tokens = estimate_tokens(self.content)

	def refresh_tokens(self) -> None:
		"""Recompute the token estimate after content changes."""
		self.tokens = estimate_tokens(self.content)

	def to_dict(self) -> dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> "Page":
		return cls(
			id=data["id"],
			title=data.get("title", ""),
			library=data.get("library", ""),
			url=data.get("url", ""),
			content=data.get("content", ""),
			tokens=int(data.get("tokens", 0)),
		)


@dataclass
class SearchResult:
	"""A ranked search hit. Not persisted; snippet is built at query time."""
	id: str
	title: str
	snippet: str
	url: str
	library: str
	score: float
