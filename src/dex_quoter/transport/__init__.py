"""HTTP transport and proxy handling."""

from dex_quoter.transport.http import (
    HttpxTransport,
    Transport,
    TransportFailure,
    TransportOutcome,
    TransportSuccess,
)
from dex_quoter.transport.proxy import apply_proxy_prefix

__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportFailure",
    "TransportOutcome",
    "TransportSuccess",
    "apply_proxy_prefix",
]
