"""Pytest configuration and shared fixtures for dex-quoter tests."""

import asyncio
import os
from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from dex_quoter.config import ScanSettings
from dex_quoter.core.models import Chain, QuoteAction, QuoteRequest, Token, TransportRequest
from dex_quoter.transport.http import TransportFailure, TransportOutcome, TransportSuccess

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDT = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
WALLET = "0x1111111111111111111111111111111111111111"


class FakeTransport:
    """
    Transport double that records requests and replays a scripted outcome.

    ``responder`` is either a fixed outcome or a callable taking the
    request and returning one.
    """

    def __init__(self, responder: TransportOutcome | Callable[[TransportRequest], TransportOutcome]) -> None:
        self.responder = responder
        self.requests: list[TransportRequest] = []

    async def send(self, request: TransportRequest, timeout_ms: int) -> TransportOutcome:
        self.requests.append(request)
        # Yield so concurrent callers actually overlap
        await asyncio.sleep(0)
        if callable(self.responder):
            return self.responder(request)
        return self.responder

    @property
    def calls(self) -> int:
        return len(self.requests)


class HangingTransport:
    """Transport that never answers and ignores its timeout argument."""

    def __init__(self) -> None:
        self.calls = 0

    async def send(self, request: TransportRequest, timeout_ms: int) -> TransportOutcome:
        self.calls += 1
        await asyncio.sleep(3600)
        return TransportFailure(status_token="error")


def success(body: Any, status_code: int = 200) -> TransportSuccess:
    return TransportSuccess(status_code=status_code, body=body)


def failure(status_code: int, token: str = "error", text: str | None = None) -> TransportFailure:
    return TransportFailure(status_code=status_code, status_token=token, text=text)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep DEX_QUOTER_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("DEX_QUOTER_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> ScanSettings:
    """Settings snapshot with a one second timeout."""
    return ScanSettings(scan_speed_seconds=Decimal("1"))


@pytest.fixture
def make_request() -> Callable[..., QuoteRequest]:
    """Factory for 1 WETH -> USDT requests on Ethereum."""

    def _make(
        provider: str = "kyber",
        amount: str = "1",
        chain: Chain | None = None,
        source: Token | None = None,
        dest: Token | None = None,
        **kwargs: Any,
    ) -> QuoteRequest:
        return QuoteRequest(
            source_token=source or Token(address=WETH, decimals=18),
            dest_token=dest or Token(address=USDT, decimals=6),
            amount_in=Decimal(amount),
            chain=chain or Chain(id=1, name="ethereum"),
            provider=provider,
            action=kwargs.pop("action", QuoteAction.TOKEN_TO_PAIR),
            **kwargs,
        )

    return _make
