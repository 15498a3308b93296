"""0x liquidity through the Matcha REST API."""

from typing import Any

import httpx

from dex_quoter.core.models import QuoteRequest, QuoteResult, TransportRequest
from dex_quoter.providers.base import BaseQuoteStrategy, QuoteContext, register_strategy

SOLANA_CHAIN = "solana"


@register_strategy
class ZeroXStrategy(BaseQuoteStrategy):
    """
    Strategy for 0x via Matcha.

    Solana uses the quote endpoint with a ``userPublicKey`` parameter; every
    other chain uses the price endpoint with a ``chainId`` parameter. Both
    return a single ``buyAmount`` and no fee estimate.
    """

    name = "0x"
    label = "0X"

    BASE_URL = "https://matcha.xyz"

    # Quote-only placeholder when no wallet is configured
    DEFAULT_SOLANA_PUBLIC_KEY = "Eo6CpSc1ViboPva7NZ1YuxUnDCgqnFDXzcDMDAF6YJ1L"

    def build_request(self, ctx: QuoteContext) -> TransportRequest:
        """Build the GET request for the chain family."""
        request = ctx.request

        if ctx.chain_name == SOLANA_CHAIN:
            # Solana mints are case sensitive
            url = httpx.URL(
                f"{self.BASE_URL}/api/swap/quote/solana",
                params={
                    "sellTokenAddress": request.source_token.address,
                    "buyTokenAddress": request.dest_token.address,
                    "sellAmount": str(ctx.amount_in_minor),
                    "dynamicSlippage": "true",
                    "slippageBps": "50",
                    "userPublicKey": ctx.wallet_address or self.DEFAULT_SOLANA_PUBLIC_KEY,
                },
            )
        else:
            url = httpx.URL(
                f"{self.BASE_URL}/api/swap/price",
                params={
                    "chainId": str(ctx.chain_id),
                    "buyToken": ctx.dest_address,
                    "sellToken": ctx.source_address,
                    "sellAmount": str(ctx.amount_in_minor),
                },
            )
        return TransportRequest(url=str(url), method="GET")

    def parse_response(self, raw: Any, ctx: QuoteContext) -> QuoteResult:
        """Read ``buyAmount``; the fee always comes from the chain table."""
        amount_out = self.require(raw, ("buyAmount",), "buyAmount")
        return self.make_result(ctx, amount_out)

    def deep_link(self, request: QuoteRequest) -> str | None:
        chain = request.chain.name.lower()
        return (
            f"{self.BASE_URL}/tokens/{chain}/{request.source_token.address}"
            f"?buyChain={request.chain.id}&buyAddress={request.dest_token.address}"
        )
