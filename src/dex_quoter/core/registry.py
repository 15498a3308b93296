"""Provider strategy registry with alias resolution."""

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from dex_quoter.core.errors import UnsupportedProviderError
from dex_quoter.core.models import QuoteRequest, QuoteResult, TransportRequest

logger = logging.getLogger(__name__)


@runtime_checkable
class QuoteStrategy(Protocol):
    """
    Interface that every provider strategy implements.

    Attributes
    ----------
    name : str
        Canonical strategy identifier (e.g., 'kyber', 'okx')
    label : str
        Display label used in results and diagnostics

    Methods
    -------
    build_request(ctx)
        Turn a quote context into a transport request
    parse_response(raw, ctx)
        Turn a raw provider response into a normalized quote
    deep_link(request)
        Link to the same trade on the provider's own app

    """

    name: str
    label: str

    def build_request(self, ctx: Any) -> TransportRequest:
        """Build the provider request for one quote."""
        ...

    def parse_response(self, raw: Any, ctx: Any) -> QuoteResult:
        """Normalize the provider response for one quote."""
        ...

    def deep_link(self, request: QuoteRequest) -> str | None:
        """Build a link to view the trade on the provider's site."""
        ...


class ProviderDescriptor(BaseModel):
    """
    Registry entry for one provider identifier.

    Attributes
    ----------
    key : str
        Normalized lowercase identifier
    strategy : QuoteStrategy | None
        Request builder and response parser pair (None for pure aliases)
    proxy_enabled : bool
        Route outbound URLs through the configured proxy prefix
    fallback_allowed : bool
        Allow the fallback aggregation service for this provider
    alias_of : str | None
        Canonical provider this entry resolves to

    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str = ""
    strategy: QuoteStrategy | None = None
    proxy_enabled: bool = False
    fallback_allowed: bool = False
    alias_of: str | None = None


class ProviderRegistry:
    """
    Mapping from provider identifier to its descriptor.

    Constructed once at process start and handed to every executor. Each
    ``register`` call swaps in a new mapping, so concurrent readers always
    see a complete snapshot.

    Parameters
    ----------
    descriptors : Mapping[str, ProviderDescriptor] | None
        Initial entries

    """

    def __init__(self, descriptors: Mapping[str, ProviderDescriptor] | None = None) -> None:
        self._entries: dict[str, ProviderDescriptor] = {}
        for name, descriptor in (descriptors or {}).items():
            self.register(name, descriptor)

    @staticmethod
    def normalize_name(name: str | None) -> str:
        """Normalize a provider identifier for lookups."""
        return str(name or "").strip().lower()

    def register(self, name: str, descriptor: ProviderDescriptor) -> ProviderDescriptor:
        """
        Register or overwrite a provider descriptor.

        Parameters
        ----------
        name : str
            Provider identifier (any case)
        descriptor : ProviderDescriptor
            Descriptor to store

        Returns
        -------
        ProviderDescriptor
            The stored descriptor with its normalized key

        Raises
        ------
        ValueError
            If the name is empty or the descriptor has neither a strategy nor an alias

        """
        key = self.normalize_name(name)
        if not key:
            msg = "Provider name must not be empty"
            raise ValueError(msg)
        if descriptor.strategy is None and not descriptor.alias_of:
            msg = f"Provider '{key}' must define a strategy or 'alias_of'"
            raise ValueError(msg)

        stored = descriptor.model_copy(
            update={
                "key": key,
                "alias_of": self.normalize_name(descriptor.alias_of) or None,
            }
        )
        self._entries = {**self._entries, key: stored}
        logger.debug("Registered provider %s (alias_of=%s)", key, stored.alias_of)
        return stored

    def register_alias(self, name: str, target: str) -> ProviderDescriptor:
        """Register ``name`` as a legacy alias of ``target``."""
        return self.register(name, ProviderDescriptor(alias_of=target))

    def get(self, name: str) -> ProviderDescriptor | None:
        """Return the raw entry for ``name`` without following aliases."""
        return self._entries.get(self.normalize_name(name))

    def resolve(self, name: str) -> ProviderDescriptor | None:
        """
        Resolve a provider identifier to a descriptor with a strategy.

        Parameters
        ----------
        name : str
            Provider identifier (any case)

        Returns
        -------
        ProviderDescriptor | None
            The descriptor (the alias target for aliases) or None if unknown

        """
        entries = self._entries
        descriptor = entries.get(self.normalize_name(name))

        # Acyclic aliases are guaranteed by the caller, the hop limit only bounds the walk
        for _ in range(len(entries)):
            if descriptor is None or not descriptor.alias_of:
                break
            descriptor = entries.get(descriptor.alias_of)

        if descriptor is None or descriptor.strategy is None:
            return None
        return descriptor

    def require(self, name: str) -> ProviderDescriptor:
        """
        Resolve a provider identifier or fail.

        Raises
        ------
        UnsupportedProviderError
            If the identifier does not resolve to a strategy

        """
        descriptor = self.resolve(name)
        if descriptor is None:
            msg = f"Unsupported provider '{name}'"
            raise UnsupportedProviderError(msg)
        return descriptor

    def list_providers(self) -> list[str]:
        """
        Get all registered provider identifiers.

        Returns
        -------
        list[str]
            Keys in insertion order (for display only)

        """
        return list(self._entries.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_table(
        cls,
        table: Mapping[str, Mapping[str, Any]],
        strategies: Mapping[str, QuoteStrategy],
    ) -> "ProviderRegistry":
        """
        Seed a registry from a static configuration table.

        Parameters
        ----------
        table : Mapping[str, Mapping[str, Any]]
            ``{provider: {strategy, proxy, allow_fallback, alias_of}}``
        strategies : Mapping[str, QuoteStrategy]
            Available strategy instances by name

        Returns
        -------
        ProviderRegistry
            Registry holding one entry per table row

        Raises
        ------
        ValueError
            If a row names a strategy that does not exist

        """
        registry = cls()
        for name, row in table.items():
            row = row or {}
            alias_of = row.get("alias_of")
            strategy = None
            if not alias_of:
                strategy_name = cls.normalize_name(row.get("strategy") or name)
                strategy = strategies.get(strategy_name)
                if strategy is None:
                    msg = f"Unknown strategy '{strategy_name}' for provider '{name}'"
                    raise ValueError(msg)

            registry.register(
                str(name),
                ProviderDescriptor(
                    strategy=strategy,
                    proxy_enabled=bool(row.get("proxy", False)),
                    fallback_allowed=bool(row.get("allow_fallback", False)),
                    alias_of=alias_of,
                ),
            )
        return registry
