"""Quotes through the external fallback aggregation service."""

import logging
from typing import Any

from dex_quoter.config import DEFAULT_FALLBACK_URL, ScanSettings, load_scan_settings
from dex_quoter.core.amounts import from_minor_units, to_minor_units
from dex_quoter.core.errors import ResponseParseError
from dex_quoter.core.executor import send_with_timeout
from dex_quoter.core.models import (
    ErrorClassification,
    QuoteError,
    QuoteOutcome,
    QuoteRequest,
    QuoteResult,
    Token,
    TransportRequest,
)
from dex_quoter.core.status import classify_failure, format_failure_message
from dex_quoter.data import get_fallback_fee
from dex_quoter.transport.http import Transport, TransportFailure

logger = logging.getLogger(__name__)


class FallbackQuoteExecutor:
    """
    Executes quotes through one fixed aggregation endpoint.

    The service takes a provider-agnostic payload and dispatches to the
    named aggregator itself, so no strategy lookup happens here. Same
    timeout and classification contract as ``QuoteExecutor``: one call,
    one outcome, no retries.

    Parameters
    ----------
    transport : Transport
        HTTP transport
    url : str
        Fallback service endpoint

    """

    LABEL = "FALLBACK"

    def __init__(self, transport: Transport, url: str = DEFAULT_FALLBACK_URL) -> None:
        self.transport = transport
        self.url = url

    @staticmethod
    def _token_payload(token: Token, chain_id: int) -> dict[str, Any]:
        return {
            "chainId": chain_id,
            "type": "TOKEN",
            "address": token.address.lower(),
            "decimals": token.decimals,
        }

    def build_payload(self, provider: str, request: QuoteRequest, settings: ScanSettings) -> dict[str, Any]:
        """
        Build the provider-agnostic POST body.

        Parameters
        ----------
        provider : str
            Aggregator slug the service should dispatch to
        request : QuoteRequest
            Canonical request
        settings : ScanSettings
            Settings snapshot (sender fallback and gas price)

        Returns
        -------
        dict[str, Any]
            JSON payload

        """
        chain_id = request.chain.id
        return {
            "chainId": chain_id,
            "aggregatorSlug": provider.strip().lower(),
            "sender": request.wallet_address or settings.wallet_address,
            "inToken": self._token_payload(request.source_token, chain_id),
            "outToken": self._token_payload(request.dest_token, chain_id),
            "amountInWei": str(to_minor_units(request.amount_in, request.source_token.decimals)),
            "slippageBps": str(request.slippage_bps),
            "gasPriceGwei": float(settings.gas_price_gwei),
        }

    async def execute(
        self,
        provider: str,
        request: QuoteRequest,
        settings: ScanSettings | None = None,
    ) -> QuoteOutcome:
        """
        Quote ``request`` through the fallback service on behalf of ``provider``.

        Parameters
        ----------
        provider : str
            Aggregator slug
        request : QuoteRequest
            Canonical request
        settings : ScanSettings | None
            Settings snapshot, read from the environment if None

        Returns
        -------
        QuoteOutcome
            Normalized result, or a classified error

        """
        settings = settings or load_scan_settings()
        transport_request = TransportRequest(
            url=self.url,
            method="POST",
            body=self.build_payload(provider, request, settings),
        )

        logger.debug("%s POST %s for %s (timeout=%dms)", self.LABEL, self.url, provider, settings.timeout_ms)
        outcome = await send_with_timeout(self.transport, transport_request, settings.timeout_ms)

        if isinstance(outcome, TransportFailure):
            return self._error(
                request,
                classify_failure(outcome.status_code, outcome.status_token),
                format_failure_message(self.LABEL, outcome.status_code, outcome.status_token),
                status_code=outcome.status_code,
                status_token=outcome.status_token,
                response_text=outcome.text,
            )

        body = outcome.body
        raw_amount = body.get("amountOutWei") if isinstance(body, dict) else None
        try:
            if raw_amount is None:
                msg = "amountOutWei missing"
                raise ResponseParseError(msg)
            amount_out = from_minor_units(raw_amount, request.dest_token.decimals)
        except ResponseParseError as e:
            logger.debug("Fallback response rejected: %s", e)
            return self._error(
                request,
                ErrorClassification.PARSE_ERROR,
                f"{self.LABEL}: fallback response invalid",
                status_code=outcome.status_code,
            )

        return QuoteResult(
            provider_label=provider.strip().upper(),
            provider=provider,
            amount_out=amount_out,
            fee_estimate_usd=get_fallback_fee(request.chain.name),
            source_url=self.url,
            correlation_id=request.correlation_id,
            source_token=request.source_token,
            dest_token=request.dest_token,
        )

    def _error(
        self,
        request: QuoteRequest,
        classification: ErrorClassification,
        message: str,
        *,
        status_code: int = 0,
        status_token: str | None = None,
        response_text: str | None = None,
    ) -> QuoteError:
        logger.warning("Fallback quote failed [%s]: %s", classification.value, message)
        return QuoteError(
            status_code=status_code,
            classification=classification,
            message=message,
            provider_label=self.LABEL,
            status_token=status_token,
            response_text=response_text,
            correlation_id=request.correlation_id,
        )
