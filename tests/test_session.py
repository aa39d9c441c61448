import asyncio

import pytest

from portfolio_diversity.data.quote_source import QuoteSourceError
from portfolio_diversity.models.holding import Holding
from portfolio_diversity.session import Portfolio, PortfolioSession

STOCKS = [
    Holding(symbol="AAPL", price=150.0, sector="Tech"),
    Holding(symbol="MSFT", price=250.0, sector="Tech"),
    Holding(symbol="XOM", price=100.0, sector="Energy"),
]


class FakeSource:
    source_name = "Fake"

    def __init__(self, result: list[Holding] | None = None, error: str | None = None):
        self.result = result if result is not None else STOCKS
        self.error = error
        self.calls = 0

    async def fetch_holdings(self, limit: int | None = None) -> list[Holding]:
        self.calls += 1
        if self.error is not None:
            raise QuoteSourceError(self.error)
        return list(self.result[:limit] if limit else self.result)


class GatedSource(FakeSource):
    def __init__(self, gate: asyncio.Event):
        super().__init__()
        self.gate = gate

    async def fetch_holdings(self, limit: int | None = None) -> list[Holding]:
        self.calls += 1
        await self.gate.wait()
        return list(self.result)


class TestFetch:
    def test_success(self):
        session = PortfolioSession(FakeSource())
        stocks = asyncio.run(session.fetch_stocks())
        assert stocks == STOCKS
        assert session.stocks == STOCKS
        assert session.error is None
        assert session.loading is False

    def test_limit_passed_through(self):
        session = PortfolioSession(FakeSource())
        asyncio.run(session.fetch_stocks(limit=1))
        assert [s.symbol for s in session.stocks] == ["AAPL"]

    def test_failure_keeps_state(self):
        source = FakeSource()
        session = PortfolioSession(source)
        asyncio.run(session.fetch_stocks())
        session.add_symbol("AAPL")

        source.error = "Request failed with status code 429"
        asyncio.run(session.fetch_stocks())

        assert session.error == "Request failed with status code 429"
        assert session.stocks == STOCKS
        assert len(session.portfolio) == 1
        assert session.loading is False

    def test_new_fetch_clears_error(self):
        source = FakeSource(error="boom")
        session = PortfolioSession(source)
        asyncio.run(session.fetch_stocks())
        assert session.error == "boom"

        source.error = None
        asyncio.run(session.fetch_stocks())
        assert session.error is None

    def test_duplicate_fetch_ignored_while_loading(self):
        async def scenario():
            gate = asyncio.Event()
            source = GatedSource(gate)
            session = PortfolioSession(source)
            first = asyncio.create_task(session.fetch_stocks())
            await asyncio.sleep(0)
            assert session.loading is True
            second = await session.fetch_stocks()
            gate.set()
            await first
            return source, session, second

        source, session, second = asyncio.run(scenario())
        assert source.calls == 1
        assert second == []
        assert session.stocks == STOCKS

    def test_other_errors_propagate(self):
        class Broken(FakeSource):
            async def fetch_holdings(self, limit=None):
                raise RuntimeError("bug")

        session = PortfolioSession(Broken())
        with pytest.raises(RuntimeError, match="bug"):
            asyncio.run(session.fetch_stocks())
        assert session.loading is False


class TestErrorMessage:
    def test_none_without_error(self):
        assert PortfolioSession(FakeSource()).error_message is None

    def test_with_error(self):
        session = PortfolioSession(FakeSource())
        session.error = "API key is not defined"
        assert session.error_message == (
            "API key is not defined. Please try again later."
        )

    def test_empty_error(self):
        session = PortfolioSession(FakeSource())
        session.error = ""
        assert session.error_message == "Please try again later."

    def test_dismiss(self):
        session = PortfolioSession(FakeSource())
        session.error = "boom"
        session.dismiss_error()
        assert session.error_message is None


class TestPortfolioUpdates:
    def test_initial_score_is_zero(self):
        session = PortfolioSession(FakeSource())
        assert session.diversity_score == 0.0
        assert session.summary.sector_weights == {}

    def test_score_recomputed_on_add(self):
        session = PortfolioSession(FakeSource())
        for stock in STOCKS:
            session.add_to_portfolio(stock)
        assert session.summary.sector_weights == {"Tech": 400, "Energy": 100}
        assert session.diversity_score == pytest.approx(32.0)

    def test_single_add_scores_zero(self):
        session = PortfolioSession(FakeSource())
        session.add_to_portfolio(STOCKS[2])
        assert session.diversity_score == pytest.approx(0.0)

    def test_add_symbol_case_insensitive(self):
        session = PortfolioSession(FakeSource())
        asyncio.run(session.fetch_stocks())
        added = session.add_symbol("xom")
        assert added.symbol == "XOM"
        assert session.portfolio.holdings == (added,)

    def test_add_symbol_duplicates(self):
        session = PortfolioSession(FakeSource())
        asyncio.run(session.fetch_stocks())
        session.add_symbol("AAPL")
        session.add_symbol("AAPL")
        assert len(session.portfolio) == 2
        assert session.summary.sector_weights == {"Tech": 300}

    def test_add_unknown_symbol(self):
        session = PortfolioSession(FakeSource())
        asyncio.run(session.fetch_stocks())
        with pytest.raises(KeyError):
            session.add_symbol("NOPE")
        assert len(session.portfolio) == 0


class TestPortfolio:
    def test_empty(self):
        p = Portfolio()
        assert len(p) == 0
        assert p.holdings == ()

    def test_add_preserves_order_and_duplicates(self):
        p = Portfolio()
        a = Holding(symbol="AAPL", price=150.0, sector="Tech")
        x = Holding(symbol="XOM", price=100.0, sector="Energy")
        p.add(a)
        p.add(x)
        p.add(a)
        assert [h.symbol for h in p] == ["AAPL", "XOM", "AAPL"]

    def test_listener_called_after_append(self):
        p = Portfolio()
        seen: list[int] = []
        p.subscribe(lambda portfolio: seen.append(len(portfolio)))
        p.add(Holding(symbol="AAPL", price=1.0))
        p.add(Holding(symbol="MSFT", price=2.0))
        assert seen == [1, 2]

    def test_holdings_snapshot_is_immutable(self):
        p = Portfolio([Holding(symbol="AAPL", price=1.0)])
        snapshot = p.holdings
        p.add(Holding(symbol="MSFT", price=2.0))
        assert len(snapshot) == 1
        assert len(p.holdings) == 2

