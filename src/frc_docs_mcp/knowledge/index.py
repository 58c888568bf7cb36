"""
Full-text search index over documentation pages.

Each indexed field gets its own BM25+ model (rank_bm25). Query terms are
expanded against the field vocabulary with prefix and edit-distance
matching, each expansion carrying a weight below an exact hit. Field scores
are boosted and summed per document.

The serialized form (to_dict/from_dict) stores the tokenized fields and the
stored fields only; BM25 statistics are recomputed on load.
"""

import bisect
import logging
import math
import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from rank_bm25 import BM25Plus

logger = logging.getLogger(__name__)

INDEX_FORMAT_VERSION = 1

PREFIX_WEIGHT = 0.375
FUZZY_WEIGHT = 0.45
MAX_FUZZY_DISTANCE = 6

DEFAULT_FIELDS = ("title", "content")
DEFAULT_STORE_FIELDS = ("title", "url", "library")

_TOKEN = re.compile(r"\w+")


def tokenize(text: str) -> list[str]:
	"""Lowercase word tokens."""
	return _TOKEN.findall(text.lower())


def edit_distance(a: str, b: str, max_distance: int) -> Optional[int]:
	"""Levenshtein distance between a and b, or None if it exceeds max_distance."""
	if abs(len(a) - len(b)) > max_distance:
		return None
	previous = list(range(len(b) + 1))
	for i, char_a in enumerate(a, start=1):
		current = [i]
		for j, char_b in enumerate(b, start=1):
			current.append(min(
				previous[j] + 1,
				current[j - 1] + 1,
				previous[j - 1] + (char_a != char_b),
			))
		if min(current) > max_distance:
			return None
		previous = current
	return previous[-1] if previous[-1] <= max_distance else None


def max_fuzzy_distance(term: str, fuzzy: float) -> int:
	"""Allowed edit distance: a fraction of the term length (rounded half up), or an absolute count."""
	if fuzzy <= 0:
		return 0
	if fuzzy < 1:
		return min(MAX_FUZZY_DISTANCE, math.floor(len(term) * fuzzy + 0.5))
	return int(fuzzy)


@dataclass
class SearchHit:
	"""A ranked document reference with its stored fields."""
	id: str
	score: float
	stored: dict[str, Any] = field(default_factory=dict)


class _FieldIndex:
	"""Postings, sorted vocabulary and BM25 model for one field."""

	def __init__(self, corpus: list[list[str]]):
		self.postings: dict[str, list[int]] = defaultdict(list)
		for doc_idx, tokens in enumerate(corpus):
			for term in set(tokens):
				self.postings[term].append(doc_idx)
		self.postings = dict(self.postings)
		self.vocabulary = sorted(self.postings)
		self.by_length: dict[int, list[str]] = defaultdict(list)
		for term in self.vocabulary:
			self.by_length[len(term)].append(term)
		self.by_length = dict(self.by_length)
		self.bm25 = BM25Plus(corpus) if corpus else None

	def expand(self, term: str, fuzzy: float, prefix: bool) -> dict[str, float]:
		"""Map vocabulary terms matching the query term to match weights."""
		matches: dict[str, float] = {}
		if term in self.postings:
			matches[term] = 1.0

		if prefix:
			start = bisect.bisect_left(self.vocabulary, term)
			for candidate in self.vocabulary[start:]:
				if not candidate.startswith(term):
					break
				if candidate == term:
					continue
				extra = len(candidate) - len(term)
				weight = PREFIX_WEIGHT * len(term) / (len(term) + 0.3 * extra)
				matches[candidate] = max(matches.get(candidate, 0.0), weight)

		distance_limit = max_fuzzy_distance(term, fuzzy)
		if distance_limit:
			# Only lengths within the limit can be close enough
			lengths = range(len(term) - distance_limit, len(term) + distance_limit + 1)
			candidates = (c for length in lengths for c in self.by_length.get(length, ()))
			for candidate in candidates:
				if candidate == term:
					continue
				distance = edit_distance(term, candidate, distance_limit)
				if distance is None:
					continue
				weight = FUZZY_WEIGHT * len(term) / (len(term) + distance)
				matches[candidate] = max(matches.get(candidate, 0.0), weight)

		return matches

	def score(self, term: str) -> dict[int, float]:
		"""BM25 scores for the documents containing term."""
		doc_ids = self.postings.get(term)
		if not doc_ids or self.bm25 is None:
			return {}
		return dict(zip(doc_ids, self.bm25.get_batch_scores([term], doc_ids)))


class SearchIndex:
	"""
	In-memory lexical index with boosted fields, prefix and fuzzy matching.

	Usage:
		index = SearchIndex(search_options={"boost": {"title": 3}, "fuzzy": 0.2, "prefix": True})
		index.add_all(pages)
		hits = index.search("swerve drive")
	"""

	def __init__(
		self,
		fields: Iterable[str] = DEFAULT_FIELDS,
		store_fields: Iterable[str] = DEFAULT_STORE_FIELDS,
		search_options: Optional[dict[str, Any]] = None,
	):
		self.fields = list(fields)
		self.store_fields = list(store_fields)
		self.search_options = {"boost": {}, "fuzzy": 0.0, "prefix": False, **(search_options or {})}

		self.ids: list[str] = []
		self.stored: list[dict[str, Any]] = []
		self.documents: dict[str, list[list[str]]] = {name: [] for name in self.fields}
		self._field_indexes: Optional[dict[str, _FieldIndex]] = None

	def __len__(self) -> int:
		return len(self.ids)

	def add(self, document: Any) -> None:
		"""Index one document (a mapping or an object with matching attributes)."""
		self.ids.append(str(_get(document, "id")))
		self.stored.append({name: _get(document, name) for name in self.store_fields})
		for name in self.fields:
			self.documents[name].append(tokenize(str(_get(document, name) or "")))
		self._field_indexes = None

	def add_all(self, documents: Iterable[Any]) -> None:
		for document in documents:
			self.add(document)

	@property
	def field_indexes(self) -> dict[str, _FieldIndex]:
		if self._field_indexes is None:
			self._field_indexes = {name: _FieldIndex(self.documents[name]) for name in self.fields}
		return self._field_indexes

	def search(
		self,
		query: str,
		boost: Optional[dict[str, float]] = None,
		fuzzy: Optional[float] = None,
		prefix: Optional[bool] = None,
	) -> list[SearchHit]:
		"""
		Rank documents against the query.

		Options default to the index's search_options. Terms are OR-combined;
		hits are ordered by descending score, ties by insertion order.
		"""
		boost = self.search_options["boost"] if boost is None else boost
		fuzzy = self.search_options["fuzzy"] if fuzzy is None else fuzzy
		prefix = self.search_options["prefix"] if prefix is None else prefix

		terms = list(dict.fromkeys(tokenize(query)))
		if not terms or not self.ids:
			return []

		scores: dict[int, float] = defaultdict(float)
		for name, field_index in self.field_indexes.items():
			field_boost = boost.get(name, 1.0)
			for term in terms:
				for candidate, weight in field_index.expand(term, fuzzy, prefix).items():
					for doc_idx, score in field_index.score(candidate).items():
						scores[doc_idx] += field_boost * weight * score

		ranked = sorted(
			((doc_idx, score) for doc_idx, score in scores.items() if score > 0),
			key=lambda item: (-item[1], item[0]),
		)
		return [
			SearchHit(id=self.ids[doc_idx], score=score, stored=dict(self.stored[doc_idx]))
			for doc_idx, score in ranked
		]

	def to_dict(self) -> dict[str, Any]:
		"""Serialize the index state (JSON-compatible)."""
		return {
			"version": INDEX_FORMAT_VERSION,
			"fields": self.fields,
			"storeFields": self.store_fields,
			"ids": self.ids,
			"documents": {
				name: [" ".join(tokens) for tokens in self.documents[name]]
				for name in self.fields
			},
			"stored": self.stored,
		}

	@classmethod
	def from_dict(cls, data: dict[str, Any], search_options: Optional[dict[str, Any]] = None) -> "SearchIndex":
		"""
		Rebuild an index from to_dict() output.

		Raises:
			ValueError: if the data is not a compatible serialized index
		"""
		if not isinstance(data, dict) or data.get("version") != INDEX_FORMAT_VERSION:
			raise ValueError("Unsupported search index format")
		try:
			index = cls(
				fields=data["fields"],
				store_fields=data["storeFields"],
				search_options=search_options,
			)
			index.ids = list(data["ids"])
			index.stored = list(data["stored"])
			index.documents = {
				name: [text.split() for text in data["documents"][name]]
				for name in index.fields
			}
		except (KeyError, TypeError, AttributeError) as e:
			raise ValueError(f"Malformed search index: {e}") from e

		sizes = {len(index.ids), len(index.stored), *(len(docs) for docs in index.documents.values())}
		if len(sizes) != 1:
			raise ValueError("Search index columns have mismatched lengths")
		return index


def _get(document: Any, name: str) -> Any:
	if isinstance(document, dict):
		return document.get(name)
	return getattr(document, name, None)
