"""KyberSwap aggregator strategy (route-based GET API)."""

from typing import Any

import httpx

from dex_quoter.core.models import QuoteRequest, QuoteResult, TransportRequest
from dex_quoter.providers.base import BaseQuoteStrategy, QuoteContext, register_strategy


@register_strategy
class KyberStrategy(BaseQuoteStrategy):
    """
    Strategy for the KyberSwap aggregator.

    Quotes come from ``/{chain}/api/v1/routes``; the response nests the
    amounts under ``data.routeSummary``.
    """

    name = "kyber"
    label = "KYBER"

    BASE_URL = "https://aggregator-api.kyberswap.com"
    APP_URL = "https://kyberswap.com"

    # KyberSwap path segments that differ from our chain names
    CHAIN_MAPPING = {
        "avax": "avalanche",
    }

    def _chain_segment(self, chain_name: str) -> str:
        chain = chain_name.lower()
        return self.CHAIN_MAPPING.get(chain, chain)

    def build_request(self, ctx: QuoteContext) -> TransportRequest:
        """Build the routes GET request."""
        url = httpx.URL(
            f"{self.BASE_URL}/{self._chain_segment(ctx.chain_name)}/api/v1/routes",
            params={
                "tokenIn": ctx.source_address,
                "tokenOut": ctx.dest_address,
                "amountIn": str(ctx.amount_in_minor),
                "gasInclude": "true",
            },
        )
        return TransportRequest(url=str(url), method="GET")

    def parse_response(self, raw: Any, ctx: QuoteContext) -> QuoteResult:
        """Read ``data.routeSummary.amountOut`` and ``gasUsd``."""
        summary = self.require(raw, ("data", "routeSummary"), "data.routeSummary")
        amount_out = self.require(summary, ("amountOut",), "routeSummary.amountOut")
        return self.make_result(ctx, amount_out, summary.get("gasUsd"))

    def deep_link(self, request: QuoteRequest) -> str | None:
        chain = self._chain_segment(request.chain.name)
        # KyberSwap accepts symbols or addresses in the pair slug
        source = (request.source_symbol or request.source_token.address).lower()
        dest = (request.dest_symbol or request.dest_token.address).lower()
        return f"{self.APP_URL}/swap/{chain}/{source}-to-{dest}"
