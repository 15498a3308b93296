"""1inch quotes through meta-aggregators (DZAP and a LI.FI routes relay)."""

from typing import Any

from dex_quoter.core.errors import ResponseParseError
from dex_quoter.core.models import QuoteAction, QuoteRequest, QuoteResult, TransportRequest
from dex_quoter.providers.base import ZERO_ADDRESS, BaseQuoteStrategy, QuoteContext, read_path, register_strategy


@register_strategy
class OneInchStrategy(BaseQuoteStrategy):
    """
    Strategy for 1inch liquidity reached through meta-aggregators.

    Two routing sub-modes, selected by the request action:

    - ``TokentoPair``: DZAP multi-chain quote. The response is a dictionary
      keyed by an opaque generated key, holding ``quoteRates.oneInchViaLifi``.
    - any other action: LI.FI advanced routes restricted to 1inch. The
      response holds a ``routes`` array.
    """

    name = "1inch"
    label = "1INCH"

    DZAP_URL = "https://api.dzap.io/v1/quotes"
    LIFI_ROUTES_URL = "https://api-v1.marbleland.io/api/v1/jumper/api/p/lifi/advanced/routes"
    APP_URL = "https://app.1inch.io"

    DZAP_SOURCE = "oneInchViaLifi"

    def build_request(self, ctx: QuoteContext) -> TransportRequest:
        """Build the POST body for the sub-mode selected by the action."""
        request = ctx.request
        amount = str(ctx.amount_in_minor)

        if request.action == QuoteAction.TOKEN_TO_PAIR:
            return TransportRequest(
                url=self.DZAP_URL,
                method="POST",
                body={
                    "account": ctx.wallet_address or ZERO_ADDRESS,
                    "fromChain": ctx.chain_id,
                    "integratorId": "dzap",
                    "allowedSources": [self.DZAP_SOURCE],
                    "data": [
                        {
                            "amount": amount,
                            "srcToken": ctx.source_address,
                            "srcDecimals": request.source_token.decimals,
                            "destToken": ctx.dest_address,
                            "destDecimals": request.dest_token.decimals,
                            "slippage": float(request.slippage_percent),
                            "toChain": ctx.chain_id,
                        }
                    ],
                },
            )

        return TransportRequest(
            url=self.LIFI_ROUTES_URL,
            method="POST",
            body={
                "fromAmount": amount,
                "fromChainId": ctx.chain_id,
                "fromTokenAddress": ctx.source_address,
                "toChainId": ctx.chain_id,
                "toTokenAddress": ctx.dest_address,
                "options": {
                    "integrator": "swap.marbleland.io",
                    "order": "CHEAPEST",
                    "exchanges": {"allow": ["1inch"]},
                },
            },
        )

    def parse_response(self, raw: Any, ctx: QuoteContext) -> QuoteResult:
        """Normalize either the DZAP dictionary or the LI.FI routes array."""
        if ctx.request.action == QuoteAction.TOKEN_TO_PAIR:
            if not isinstance(raw, dict) or not raw:
                msg = "1inch quote not found in DZAP response"
                raise ResponseParseError(msg)

            quote_key = next(iter(raw))
            quote = read_path(raw, (quote_key, "quoteRates", self.DZAP_SOURCE))
            if not isinstance(quote, dict):
                msg = "1inch quote not found in DZAP response"
                raise ResponseParseError(msg)

            amount_out = quote.get("toAmount")
            if amount_out is None:
                amount_out = quote.get("destAmount")
            if amount_out is None:
                msg = "1inch quote in DZAP response has no toAmount/destAmount"
                raise ResponseParseError(msg)

            return self.make_result(ctx, amount_out, read_path(quote, ("fee", "gasFee", 0, "amountUSD")))

        route = read_path(raw, ("routes", 0))
        if not isinstance(route, dict):
            msg = "1inch route not found in LI.FI response"
            raise ResponseParseError(msg)
        amount_out = self.require(route, ("toAmount",), "routes[0].toAmount")
        return self.make_result(ctx, amount_out, route.get("gasCostUSD"))

    def deep_link(self, request: QuoteRequest) -> str | None:
        return (
            f"{self.APP_URL}/#/{request.chain.id}/simple/swap/"
            f"{request.source_token.address}/{request.dest_token.address}"
        )
