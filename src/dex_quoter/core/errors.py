"""Exceptions raised while building, sending, or normalizing a quote."""


class QuoteEngineError(Exception):
    """Base exception for the quote engine."""


class UnsupportedProviderError(QuoteEngineError):
    """Raised when a provider identifier has no registry entry."""


class RequestBuildError(QuoteEngineError):
    """Raised when a provider request cannot be built from the canonical input."""


class CredentialPoolError(RequestBuildError):
    """Raised when a signed provider has no usable credential."""


class ResponseParseError(QuoteEngineError):
    """Raised when a provider response lacks the expected field path."""
