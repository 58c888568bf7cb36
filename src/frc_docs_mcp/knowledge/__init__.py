"""
Knowledge module - Bundle storage and retrieval.

Provides:
- SearchIndex: fuzzy/prefix full-text index
- build_bundle / write_bundle / load_bundle: the persisted artifact
- search_docs / read_doc: query engine
"""

from .bundle import DocsBundle, build_bundle, load_bundle, write_bundle
from .index import SearchIndex
from .retriever import read_doc, search_docs

__all__ = [
	"DocsBundle",
	"SearchIndex",
	"build_bundle",
	"load_bundle",
	"write_bundle",
	"read_doc",
	"search_docs",
]
