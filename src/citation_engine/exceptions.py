"""Custom exception hierarchy for the citation engine."""


class CitationEngineError(Exception):
    """Base exception for all citation engine errors."""


class DecodeError(CitationEngineError):
    """A redirect token or embedded payload could not be decoded."""


class CacheError(CitationEngineError):
    """Error in the resolution cache."""


class CacheBackendError(CacheError):
    """The durable cache tier could not be read or written."""


class MetadataFetchError(CitationEngineError):
    """Error fetching page metadata for a source."""


class ConfigurationError(CitationEngineError):
    """Error in system configuration."""
