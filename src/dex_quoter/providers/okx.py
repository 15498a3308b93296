"""OKX DEX aggregator strategy (HMAC-signed GET API)."""

from typing import Any

import httpx

from dex_quoter.core.errors import CredentialPoolError
from dex_quoter.core.models import QuoteRequest, QuoteResult, TransportRequest
from dex_quoter.providers.base import BaseQuoteStrategy, QuoteContext, register_strategy


@register_strategy
class OkxStrategy(BaseQuoteStrategy):
    """
    Strategy for the OKX DEX aggregator.

    Every request is signed: the string ``timestamp + 'GET' + path + '?' +
    query`` is HMAC-signed with a credential drawn from the configured pool
    and sent in four ``OK-ACCESS-*`` headers. The response is a ``data``
    array with ``toTokenAmount`` per route.
    """

    name = "okx"
    label = "OKX"

    BASE_URL = "https://web3.okx.com"
    QUOTE_PATH = "/api/v5/dex/aggregator/quote"

    def build_request(self, ctx: QuoteContext) -> TransportRequest:
        """Build and sign the quote GET request."""
        if ctx.signer is None:
            msg = "OKX requires a signer with at least one credential"
            raise CredentialPoolError(msg)

        # OKX matches token addresses case-sensitively on non-EVM chains
        query = str(
            httpx.QueryParams(
                {
                    "amount": str(ctx.amount_in_minor),
                    "chainIndex": str(ctx.chain_id),
                    "fromTokenAddress": ctx.request.source_token.address,
                    "toTokenAddress": ctx.request.dest_token.address,
                }
            )
        )
        signed = ctx.signer.sign_request("GET", self.QUOTE_PATH, query)

        return TransportRequest(
            url=f"{self.BASE_URL}{self.QUOTE_PATH}?{query}",
            method="GET",
            headers={
                "OK-ACCESS-KEY": signed.api_key,
                "OK-ACCESS-SIGN": signed.signature,
                "OK-ACCESS-PASSPHRASE": signed.passphrase,
                "OK-ACCESS-TIMESTAMP": signed.timestamp,
                "Content-Type": "application/json",
            },
        )

    def parse_response(self, raw: Any, ctx: QuoteContext) -> QuoteResult:
        """Read ``data[0].toTokenAmount``."""
        amount_out = self.require(raw, ("data", 0, "toTokenAmount"), "data[0].toTokenAmount")
        return self.make_result(ctx, amount_out)

    def deep_link(self, request: QuoteRequest) -> str | None:
        return (
            f"{self.BASE_URL}/dex-swap?chain={request.chain.id}"
            f"&inputCurrency={request.source_token.address}&outputCurrency={request.dest_token.address}"
        )
