from portfolio_diversity.models.holding import Holding
from portfolio_diversity.output.formatters import (
    fmt_price,
    fmt_score,
    fmt_share,
    holding_line,
    score_color,
)


class TestFmtPrice:
    def test_basic(self):
        assert fmt_price(150.0) == "$150.00"

    def test_thousands(self):
        assert fmt_price(1234.5) == "$1,234.50"

    def test_negative(self):
        assert fmt_price(-5.1) == "-$5.10"

    def test_none(self):
        assert fmt_price(None) == "N/A"


class TestFmtScore:
    def test_two_decimals(self):
        assert fmt_score(31.999999999999996) == "32.00"

    def test_zero(self):
        assert fmt_score(0.0) == "0.00"

    def test_none(self):
        assert fmt_score(None) == "N/A"


class TestFmtShare:
    def test_basic(self):
        assert fmt_share(80.0) == "80.0%"

    def test_none(self):
        assert fmt_share(None) == "N/A"


class TestHoldingLine:
    def test_line(self):
        h = Holding(symbol="AAPL", price=150, sector="Tech")
        assert holding_line(h) == "AAPL - $150.00 - Tech"


class TestScoreColor:
    def test_bands(self):
        assert score_color(75.0) == "bold green"
        assert score_color(32.0) == "yellow"
        assert score_color(0.0) == "red"
