import asyncio
import logging
from typing import Any

import httpx

from portfolio_diversity.config import AppConfig
from portfolio_diversity.data.quote_source import QuoteSourceError
from portfolio_diversity.models.holding import UNCLASSIFIED_SECTOR, Holding

logger = logging.getLogger(__name__)

SYMBOL_PATH = "/api/v1/stock/symbol"
QUOTE_PATH = "/api/v1/quote"
PROFILE_PATH = "/api/v1/stock/profile2"


def _describe(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"Request failed with status code {exc.response.status_code}"
    if isinstance(exc, httpx.TimeoutException):
        return "Request timed out"
    if isinstance(exc, httpx.HTTPError):
        return f"Network error: {exc}" if str(exc) else "Network error"
    return f"Malformed response: {exc}"


class FinnhubClient:
    """Async client for the Finnhub symbol, quote and profile endpoints."""

    source_name: str = "Finnhub"

    def __init__(
        self,
        config: AppConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FinnhubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get(self, path: str, **params: str) -> Any:
        params["token"] = self.config.api_key or ""
        resp = await self.client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()

    async def list_symbols(self, exchange: str | None = None) -> list[str]:
        data = await self._get(SYMBOL_PATH, exchange=exchange or self.config.exchange)
        if not isinstance(data, list):
            raise ValueError("symbol list is not an array")
        return [str(item["symbol"]) for item in data]

    async def get_quote(self, symbol: str) -> float:
        data = await self._get(QUOTE_PATH, symbol=symbol)
        if not isinstance(data, dict):
            raise ValueError(f"quote for {symbol} is not an object")
        # Finnhub reports unknown symbols with c=0 or omits it
        return float(data.get("c") or 0.0)

    async def get_profile(self, symbol: str) -> str:
        data = await self._get(PROFILE_PATH, symbol=symbol)
        if not isinstance(data, dict):
            raise ValueError(f"profile for {symbol} is not an object")
        return data.get("finnhubIndustry") or UNCLASSIFIED_SECTOR

    async def _fetch_one(self, symbol: str, semaphore: asyncio.Semaphore) -> Holding:
        async with semaphore:
            price = await self.get_quote(symbol)
            sector = await self.get_profile(symbol)
        return Holding(symbol=symbol, price=price, sector=sector)

    async def _fetch_all(self, symbols: list[str]) -> list[Holding]:
        semaphore = asyncio.Semaphore(max(1, self.config.max_concurrency))
        tasks = [asyncio.ensure_future(self._fetch_one(s, semaphore)) for s in symbols]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # first failure wins; stop the remaining requests
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def fetch_holdings(self, limit: int | None = None) -> list[Holding]:
        if not self.config.api_key:
            raise QuoteSourceError("API key is not defined")

        n = self.config.symbol_limit if limit is None else limit

        try:
            symbols = (await self.list_symbols())[:n]
            logger.info("Fetching quotes for %d symbols", len(symbols))
            holdings = await self._fetch_all(symbols)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("Error fetching stock data", exc_info=True)
            raise QuoteSourceError(_describe(e)) from e

        return holdings
