"""Caller-side quote orchestration across providers."""

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any

from dex_quoter.auth.signer import HmacSigner, load_credential_pools
from dex_quoter.config import EngineConfig, ScanSettings, load_scan_settings
from dex_quoter.core.executor import QuoteExecutor
from dex_quoter.core.fallback import FallbackQuoteExecutor
from dex_quoter.core.models import ErrorClassification, QuoteError, QuoteOutcome, QuoteRequest
from dex_quoter.core.registry import ProviderRegistry
from dex_quoter.transport.http import Transport

logger = logging.getLogger(__name__)

_FALLBACK_ON = {ErrorClassification.TIMEOUT, ErrorClassification.HTTP_ERROR}


def request_fingerprint(
    request: QuoteRequest,
    settings: ScanSettings,
    use_fallback: bool = False,
) -> tuple[Any, ...]:
    """
    Identity of a quote for in-flight de-duplication.

    Covers every input that shapes the outbound request, including the
    settings snapshot, so only calls that would send the same request share one.
    """
    return (
        ProviderRegistry.normalize_name(request.provider),
        request.chain.id,
        request.chain.name.lower(),
        request.source_token.address,
        request.source_token.decimals,
        request.dest_token.address,
        request.dest_token.decimals,
        request.amount_in.normalize(),
        request.action.value,
        request.slippage_percent.normalize(),
        request.slippage_bps,
        request.wallet_address or settings.wallet_address,
        settings.gas_price_gwei.normalize(),
        settings.scan_speed_seconds.normalize(),
        use_fallback,
    )


class QuoteEngine:
    """
    Fans quote requests out to providers and applies caller-level policy.

    The executors never retry. The policies here are opt-in and each one
    makes at most one extra call:

    - ``fallback_for_unknown``: providers without a strategy go to the
      fallback service instead of failing with ``UnsupportedProvider``.
    - ``fallback_on_error``: a ``Timeout``/``HttpError`` from a provider
      whose descriptor allows fallback is followed by one fallback call.
    - ``dedupe_inflight``: concurrent identical requests share one call.
      Off by default, so every caller gets a fresh quote.

    Parameters
    ----------
    registry : ProviderRegistry
        Provider registry
    executor : QuoteExecutor
        Primary executor
    fallback : FallbackQuoteExecutor | None
        Fallback executor, fallback paths are disabled when None

    """

    def __init__(
        self,
        registry: ProviderRegistry,
        executor: QuoteExecutor,
        fallback: FallbackQuoteExecutor | None = None,
        *,
        dedupe_inflight: bool = False,
        fallback_for_unknown: bool = False,
        fallback_on_error: bool = False,
    ) -> None:
        self.registry = registry
        self.executor = executor
        self.fallback = fallback
        self.dedupe_inflight = dedupe_inflight
        self.fallback_for_unknown = fallback_for_unknown
        self.fallback_on_error = fallback_on_error
        self._inflight: dict[tuple[Any, ...], asyncio.Future] = {}

    @classmethod
    def from_config(
        cls,
        registry: ProviderRegistry,
        transport: Transport,
        config: EngineConfig,
    ) -> "QuoteEngine":
        """
        Wire an engine from the process configuration.

        Parameters
        ----------
        registry : ProviderRegistry
            Provider registry
        transport : Transport
            Transport shared by both executors
        config : EngineConfig
            Engine configuration

        Returns
        -------
        QuoteEngine
            Ready-to-use engine

        """
        signers = {}
        if config.credentials_file:
            pools = load_credential_pools(config.credentials_file)
            signers = {name: HmacSigner(pool) for name, pool in pools.items() if pool}

        return cls(
            registry,
            QuoteExecutor(registry, transport, proxy_prefix=config.proxy_prefix, signers=signers),
            FallbackQuoteExecutor(transport, url=config.fallback_url),
            dedupe_inflight=config.dedupe_inflight,
            fallback_for_unknown=config.fallback_for_unknown,
            fallback_on_error=config.fallback_on_error,
        )

    async def quote(
        self,
        request: QuoteRequest,
        settings: ScanSettings | None = None,
        *,
        use_fallback: bool = False,
    ) -> QuoteOutcome:
        """
        Quote one request.

        Parameters
        ----------
        request : QuoteRequest
            Canonical request, routed by ``request.provider``
        settings : ScanSettings | None
            Settings snapshot, read from the environment if None
        use_fallback : bool
            Go straight to the fallback service

        Returns
        -------
        QuoteOutcome
            Result or error, never raises

        """
        settings = settings or load_scan_settings()
        if not self.dedupe_inflight:
            return await self._quote(request, settings, use_fallback)

        key = request_fingerprint(request, settings, use_fallback)
        shared = self._inflight.get(key)
        if shared is None:
            shared = asyncio.ensure_future(self._quote(request, settings, use_fallback))
            self._inflight[key] = shared
            shared.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            logger.debug("Joining in-flight quote for %s", request.provider)

        outcome = await asyncio.shield(shared)
        return outcome.model_copy(update={"correlation_id": request.correlation_id})

    def _forget(self, key: tuple[Any, ...], done: asyncio.Future) -> None:
        if self._inflight.get(key) is done:
            del self._inflight[key]

    async def _quote(self, request: QuoteRequest, settings: ScanSettings, use_fallback: bool) -> QuoteOutcome:
        provider = request.provider

        if use_fallback:
            if self.fallback is None:
                return QuoteError(
                    classification=ErrorClassification.UNSUPPORTED_PROVIDER,
                    message=f"{provider.upper()}: fallback service not configured",
                    provider_label=provider.upper(),
                    correlation_id=request.correlation_id,
                )
            return await self.fallback.execute(provider, request, settings)

        descriptor = self.registry.resolve(provider)
        if descriptor is None and self.fallback_for_unknown and self.fallback is not None:
            logger.info("No strategy for %s, using fallback service", provider)
            return await self.fallback.execute(provider, request, settings)

        outcome = await self.executor.execute(provider, request, settings)

        if (
            isinstance(outcome, QuoteError)
            and self.fallback_on_error
            and self.fallback is not None
            and descriptor is not None
            and descriptor.fallback_allowed
            and outcome.classification in _FALLBACK_ON
        ):
            logger.info("%s failed (%s), trying fallback service", provider, outcome.classification.value)
            return await self.fallback.execute(provider, request, settings)

        return outcome

    async def quote_many(
        self,
        requests: Iterable[QuoteRequest],
        settings: ScanSettings | None = None,
    ) -> list[QuoteOutcome]:
        """
        Quote many requests concurrently.

        Outcomes are returned in request order; correlate them through
        ``correlation_id`` rather than position when mixing sources.
        """
        return list(await asyncio.gather(*(self.quote(request, settings) for request in requests)))

    async def iter_quotes(
        self,
        requests: Iterable[QuoteRequest],
        settings: ScanSettings | None = None,
    ) -> AsyncIterator[QuoteOutcome]:
        """Yield outcomes in completion order."""
        for next_done in asyncio.as_completed([self.quote(request, settings) for request in requests]):
            yield await next_done
