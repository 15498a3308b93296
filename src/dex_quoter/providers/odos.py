"""Odos smart order routing strategy (solver-based POST API)."""

from typing import Any

from dex_quoter.core.errors import ResponseParseError
from dex_quoter.core.models import QuoteRequest, QuoteResult, TransportRequest
from dex_quoter.providers.base import BaseQuoteStrategy, QuoteContext, register_strategy


@register_strategy
class OdosStrategy(BaseQuoteStrategy):
    """
    Strategy for the Odos solver.

    The request carries input/output token arrays and needs a sender
    address; the response has a scalar ``outAmounts`` (a one-element list
    in compact mode) and ``gasEstimateValue`` in USD.
    """

    name = "odos"
    label = "ODOS"

    QUOTE_URL = "https://api.odos.xyz/sor/quote/v3"
    APP_URL = "https://app.odos.xyz"

    def build_request(self, ctx: QuoteContext) -> TransportRequest:
        """Build the quote POST body."""
        wallet = self.require_wallet(ctx)
        return TransportRequest(
            url=self.QUOTE_URL,
            method="POST",
            body={
                "chainId": ctx.chain_id,
                "compact": True,
                "disableRFQs": True,
                "userAddr": wallet,
                "inputTokens": [{"amount": str(ctx.amount_in_minor), "tokenAddress": ctx.source_address}],
                "outputTokens": [{"proportion": 1, "tokenAddress": ctx.dest_address}],
                "slippageLimitPercent": float(ctx.request.slippage_percent),
            },
        )

    def parse_response(self, raw: Any, ctx: QuoteContext) -> QuoteResult:
        """Read ``outAmounts`` and ``gasEstimateValue``."""
        amount_out = self.require(raw, ("outAmounts",), "outAmounts")
        if isinstance(amount_out, list):
            if not amount_out:
                msg = "Invalid ODOS response: outAmounts is empty"
                raise ResponseParseError(msg)
            amount_out = amount_out[0]
        return self.make_result(ctx, amount_out, raw.get("gasEstimateValue"))

    def deep_link(self, request: QuoteRequest) -> str | None:
        return f"{self.APP_URL}/?chain={request.chain.id}"
