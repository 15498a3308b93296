"""HMAC request signing with a rotating credential pool."""

import base64
import hashlib
import hmac
import logging
import random
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, SecretStr

from dex_quoter.core.errors import CredentialPoolError

logger = logging.getLogger(__name__)


class ApiCredential(BaseModel):
    """
    One credential set for a signed provider.

    Attributes
    ----------
    api_key : str
        Public API key
    secret_key : SecretStr
        HMAC secret
    passphrase : SecretStr
        Account passphrase

    """

    api_key: str
    secret_key: SecretStr
    passphrase: SecretStr = SecretStr("")


class SignedHeaders(BaseModel):
    """Material returned by the signer for a single request."""

    api_key: str
    signature: str
    passphrase: str
    timestamp: str


def sign(secret: str, payload: str) -> str:
    """
    Compute the base64-encoded HMAC-SHA256 of a canonical string.

    Parameters
    ----------
    secret : str
        HMAC secret
    payload : str
        Canonical string to sign

    Returns
    -------
    str
        Base64 signature

    """
    digest = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def select_credential(pool: Sequence[ApiCredential], rng: random.Random | None = None) -> ApiCredential:
    """
    Pick a credential from the pool at random.

    Raises
    ------
    CredentialPoolError
        If the pool is empty

    """
    if not pool:
        msg = "Credential pool is empty"
        raise CredentialPoolError(msg)
    return (rng or random).choice(list(pool))


def iso_timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    moment = now or datetime.now(UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HmacSigner:
    """
    Signs provider requests with a credential drawn from a pool.

    Selecting at random spreads requests across several accounts. A pool
    of one is valid.

    Parameters
    ----------
    pool : Sequence[ApiCredential]
        Configured credentials
    rng : random.Random | None
        Random source (injectable for tests)

    """

    def __init__(self, pool: Sequence[ApiCredential], rng: random.Random | None = None) -> None:
        self.pool = list(pool)
        self.rng = rng

    def sign_request(
        self,
        method: str,
        path: str,
        query: str = "",
        timestamp: str | None = None,
    ) -> SignedHeaders:
        """
        Sign ``timestamp + METHOD + path [+ '?' + query]``.

        Parameters
        ----------
        method : str
            HTTP method
        path : str
            Request path (e.g., '/api/v5/dex/aggregator/quote')
        query : str
            Encoded query string without the leading '?'
        timestamp : str | None
            ISO timestamp, current time if None

        Returns
        -------
        SignedHeaders
            Key, signature, passphrase, and timestamp for the request headers

        """
        credential = select_credential(self.pool, self.rng)
        stamp = timestamp or iso_timestamp()
        payload = f"{stamp}{method.upper()}{path}"
        if query:
            payload = f"{payload}?{query}"

        return SignedHeaders(
            api_key=credential.api_key,
            signature=sign(credential.secret_key.get_secret_value(), payload),
            passphrase=credential.passphrase.get_secret_value(),
            timestamp=stamp,
        )


def load_credential_pools(path: str | Path) -> dict[str, list[ApiCredential]]:
    """
    Load credential pools from a YAML file.

    The file maps provider names to lists of ``{api_key, secret_key, passphrase}``.

    Parameters
    ----------
    path : str | Path
        YAML file path

    Returns
    -------
    dict[str, list[ApiCredential]]
        Pools keyed by lowercase provider name

    """
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    pools = {
        str(provider).lower(): [ApiCredential(**entry) for entry in entries or []]
        for provider, entries in raw.items()
    }
    logger.debug("Loaded credential pools: %s", {name: len(pool) for name, pool in pools.items()})
    return pools
