"""Single-provider quote execution with per-call failure isolation."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from dex_quoter.config import ScanSettings, load_scan_settings
from dex_quoter.core.errors import UnsupportedProviderError
from dex_quoter.core.models import ErrorClassification, QuoteError, QuoteOutcome, QuoteRequest, TransportRequest
from dex_quoter.core.registry import ProviderRegistry, QuoteStrategy
from dex_quoter.core.status import (
    TOKEN_NETWORK_ERROR,
    TOKEN_TIMEOUT,
    classify_failure,
    format_failure_message,
)
from dex_quoter.providers.base import QuoteContext
from dex_quoter.transport.http import Transport, TransportFailure, TransportOutcome
from dex_quoter.transport.proxy import apply_proxy_prefix

logger = logging.getLogger(__name__)


async def send_with_timeout(transport: Transport, request: TransportRequest, timeout_ms: int) -> TransportOutcome:
    """
    Send through the transport, bounding the call by ``timeout_ms``.

    The bound holds even for transports that ignore their timeout argument,
    and unexpected transport exceptions become a failure outcome.
    """
    try:
        return await asyncio.wait_for(transport.send(request, timeout_ms), timeout=timeout_ms / 1000)
    except TimeoutError:
        return TransportFailure(status_token=TOKEN_TIMEOUT)
    except Exception as e:
        logger.debug("Transport raised for %s: %s", request.url, e)
        return TransportFailure(status_token=TOKEN_NETWORK_ERROR, text=str(e))


class QuoteExecutor:
    """
    Executes one quote request against one provider.

    Steps: resolve the provider in the registry, build the request,
    optionally rewrite the URL through the proxy, send it with the
    per-call timeout, then normalize or classify the outcome.

    ``execute`` resolves exactly once per call, with either a
    ``QuoteResult`` or a ``QuoteError``, and never retries. Retry policy
    belongs to the caller.

    Parameters
    ----------
    registry : ProviderRegistry
        Provider registry
    transport : Transport
        HTTP transport
    proxy_prefix : str | None
        Relay prefix for proxy-enabled providers
    signers : Mapping[str, Any] | None
        Signer per strategy name for authenticated providers

    """

    def __init__(
        self,
        registry: ProviderRegistry,
        transport: Transport,
        *,
        proxy_prefix: str | None = None,
        signers: Mapping[str, Any] | None = None,
    ) -> None:
        self.registry = registry
        self.transport = transport
        self.proxy_prefix = proxy_prefix
        self.signers = dict(signers or {})

    async def execute(
        self,
        provider: str,
        request: QuoteRequest,
        settings: ScanSettings | None = None,
    ) -> QuoteOutcome:
        """
        Quote ``request`` through ``provider``.

        Parameters
        ----------
        provider : str
            Provider identifier (any case, aliases allowed)
        request : QuoteRequest
            Canonical request
        settings : ScanSettings | None
            Settings snapshot for this call, read from the environment if None

        Returns
        -------
        QuoteOutcome
            Normalized result, or a classified error

        """
        settings = settings or load_scan_settings()
        try:
            descriptor = self.registry.require(provider)
        except UnsupportedProviderError as e:
            label = str(provider).strip().upper()
            return self._error(request, label, ErrorClassification.UNSUPPORTED_PROVIDER, f"{label}: {e}")

        strategy: QuoteStrategy = descriptor.strategy
        label = strategy.label

        try:
            ctx = QuoteContext.from_request(request, settings, signer=self.signers.get(strategy.name))
            transport_request = strategy.build_request(ctx)
        except Exception as e:
            return self._error(
                request,
                label,
                ErrorClassification.BUILD_ERROR,
                f"{label}: Request Build Error: {e}",
            )

        source_url = transport_request.url
        if descriptor.proxy_enabled:
            transport_request = transport_request.model_copy(
                update={"url": apply_proxy_prefix(source_url, self.proxy_prefix)}
            )

        logger.debug("%s %s %s (timeout=%dms)", label, transport_request.method, source_url, settings.timeout_ms)
        outcome = await send_with_timeout(self.transport, transport_request, settings.timeout_ms)

        if isinstance(outcome, TransportFailure):
            return self._error(
                request,
                label,
                classify_failure(outcome.status_code, outcome.status_token),
                format_failure_message(label, outcome.status_code, outcome.status_token),
                status_code=outcome.status_code,
                status_token=outcome.status_token,
                response_text=outcome.text,
                deep_link=self._deep_link(strategy, request),
            )

        try:
            result = strategy.parse_response(outcome.body, ctx.model_copy(update={"source_url": source_url}))
        except Exception as e:
            return self._error(
                request,
                label,
                ErrorClassification.PARSE_ERROR,
                f"{label}: Parse Error: {e}",
                status_code=outcome.status_code,
            )

        logger.debug("%s quoted %s -> %s", label, request.amount_in, result.amount_out)
        return result

    @staticmethod
    def _deep_link(strategy: QuoteStrategy, request: QuoteRequest) -> str | None:
        try:
            return strategy.deep_link(request)
        except Exception as e:
            logger.debug("Deep link failed for %s: %s", strategy.name, e)
            return None

    @staticmethod
    def _error(
        request: QuoteRequest,
        label: str,
        classification: ErrorClassification,
        message: str,
        *,
        status_code: int = 0,
        status_token: str | None = None,
        response_text: str | None = None,
        deep_link: str | None = None,
    ) -> QuoteError:
        logger.warning("Quote failed [%s]: %s", classification.value, message)
        return QuoteError(
            status_code=status_code,
            classification=classification,
            message=message,
            provider_label=label,
            provider_deep_link=deep_link,
            status_token=status_token,
            response_text=response_text,
            correlation_id=request.correlation_id,
        )
