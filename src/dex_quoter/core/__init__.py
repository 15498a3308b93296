"""Core functionality including models, registry, executors, and status classification."""

from dex_quoter.core.models import (
    Chain,
    ErrorClassification,
    QuoteAction,
    QuoteError,
    QuoteOutcome,
    QuoteRequest,
    QuoteResult,
    Token,
    TransportRequest,
)
from dex_quoter.core.registry import ProviderDescriptor, ProviderRegistry
from dex_quoter.core.executor import QuoteExecutor
from dex_quoter.core.fallback import FallbackQuoteExecutor
from dex_quoter.core.engine import QuoteEngine

__all__ = [
    "Chain",
    "ErrorClassification",
    "FallbackQuoteExecutor",
    "ProviderDescriptor",
    "ProviderRegistry",
    "QuoteAction",
    "QuoteEngine",
    "QuoteError",
    "QuoteExecutor",
    "QuoteOutcome",
    "QuoteRequest",
    "QuoteResult",
    "Token",
    "TransportRequest",
]
