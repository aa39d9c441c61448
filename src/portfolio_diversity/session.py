import logging
from collections.abc import Callable, Iterator

from portfolio_diversity.analysis.diversity import add_holding, summarize
from portfolio_diversity.data.quote_source import QuoteSource, QuoteSourceError
from portfolio_diversity.models.holding import Holding
from portfolio_diversity.models.portfolio import PortfolioSummary

logger = logging.getLogger(__name__)

PortfolioListener = Callable[["Portfolio"], None]


class Portfolio:
    """Ordered, append-only collection of holdings.

    Duplicates are kept as separate entries. Listeners registered with
    :meth:`subscribe` are called synchronously after every :meth:`add`.
    """

    def __init__(self, holdings: list[Holding] | None = None) -> None:
        self._holdings: list[Holding] = list(holdings or [])
        self._listeners: list[PortfolioListener] = []

    @property
    def holdings(self) -> tuple[Holding, ...]:
        return tuple(self._holdings)

    def subscribe(self, listener: PortfolioListener) -> None:
        self._listeners.append(listener)

    def add(self, holding: Holding) -> None:
        self._holdings = add_holding(self._holdings, holding)
        for listener in self._listeners:
            listener(self)

    def __iter__(self) -> Iterator[Holding]:
        return iter(self._holdings)

    def __len__(self) -> int:
        return len(self._holdings)


class PortfolioSession:
    """Fetched stocks, the user's portfolio and its derived score.

    The summary is recomputed whenever the portfolio changes. A fetch that
    fails records ``error`` and leaves both the stock list and the portfolio
    untouched.
    """

    def __init__(self, source: QuoteSource) -> None:
        self.source = source
        self.stocks: list[Holding] = []
        self.portfolio = Portfolio()
        self.summary = PortfolioSummary()
        self.loading = False
        self.error: str | None = None
        self.portfolio.subscribe(self._recompute)

    @property
    def diversity_score(self) -> float:
        return self.summary.diversity_score

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        if not self.error:
            return "Please try again later."
        return f"{self.error}. Please try again later."

    def _recompute(self, portfolio: Portfolio) -> None:
        self.summary = summarize(portfolio)

    async def fetch_stocks(self, limit: int | None = None) -> list[Holding]:
        if self.loading:
            logger.debug("Fetch already in progress, ignoring request")
            return self.stocks

        self.loading = True
        self.error = None
        try:
            self.stocks = await self.source.fetch_holdings(limit)
        except QuoteSourceError as e:
            logger.error("Error fetching stock data: %s", e)
            self.error = str(e)
        finally:
            self.loading = False
        return self.stocks

    def add_to_portfolio(self, holding: Holding) -> None:
        self.portfolio.add(holding)

    def add_symbol(self, symbol: str) -> Holding:
        wanted = symbol.upper()
        for stock in self.stocks:
            if stock.symbol.upper() == wanted:
                self.add_to_portfolio(stock)
                return stock
        raise KeyError(symbol)

    def dismiss_error(self) -> None:
        self.error = None
