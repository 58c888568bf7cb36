"""Exception hierarchy for ingestion and serving."""


class FrcDocsError(Exception):
	"""Base exception for frc-docs-mcp errors."""
	pass


class ConfigurationError(FrcDocsError):
	"""Raised when required configuration (e.g. an API key) is missing."""
	pass


class DiscoveryError(FrcDocsError):
	"""Raised when no URL source is usable for a library."""
	pass


class ParseError(FrcDocsError):
	"""Raised when a discovery resource cannot be parsed."""
	pass


class FetchError(FrcDocsError):
	"""Raised when a single page cannot be fetched."""
	pass


class ConversionError(FrcDocsError):
	"""Raised when a single page cannot be converted to markdown."""
	pass


class PersistenceError(FrcDocsError):
	"""Raised when the documentation bundle is missing or corrupt."""
	pass
