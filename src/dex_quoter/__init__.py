"""Multi-provider DEX aggregator quote engine."""

__version__ = "0.1.0"
