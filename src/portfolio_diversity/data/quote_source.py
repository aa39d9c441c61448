from typing import Protocol

from portfolio_diversity.models.holding import Holding


class QuoteSourceError(RuntimeError):
    """Raised when a quote fetch fails. No partial results are returned."""


class QuoteSource(Protocol):
    """Protocol for market-data providers that produce holdings."""

    source_name: str

    async def fetch_holdings(self, limit: int | None = None) -> list[Holding]:
        """Fetch symbol, price and sector for up to ``limit`` instruments."""
        ...
