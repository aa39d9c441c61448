from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from portfolio_diversity.analysis.diversity import sector_slices
from portfolio_diversity.models.holding import Holding
from portfolio_diversity.models.portfolio import PortfolioSummary
from portfolio_diversity.output.formatters import (
    fmt_price,
    fmt_score,
    fmt_share,
    holding_line,
    score_color,
)


class PortfolioRenderer:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_header(self) -> None:
        self.console.print()
        self.console.print(
            Panel(
                "[bold]Stock Portfolio Diversity Calculator[/bold]",
                style="cyan",
            )
        )

    def render_stocks(self, stocks: Sequence[Holding]) -> None:
        table = Table(title="Stocks List", show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Symbol", style="cyan")
        table.add_column("Price", justify="right")
        table.add_column("Sector")
        for i, stock in enumerate(stocks, start=1):
            table.add_row(str(i), stock.symbol, fmt_price(stock.price), stock.sector)
        self.console.print(table)

    def render_portfolio(
        self, holdings: Sequence[Holding], summary: PortfolioSummary
    ) -> None:
        if holdings:
            self.console.print(
                Panel(
                    "\n".join(holding_line(h) for h in holdings),
                    title="Portfolio",
                )
            )
        else:
            self.console.print(Panel("[dim]No holdings yet[/dim]", title="Portfolio"))

        if summary.sector_weights:
            self._render_allocation(summary)
        self.render_score(summary.diversity_score)

    def _render_allocation(self, summary: PortfolioSummary) -> None:
        table = Table(title="Sector Allocation", show_header=True)
        table.add_column("Sector", style="cyan")
        table.add_column("Weight", justify="right")
        table.add_column("Share", justify="right")
        for s in sector_slices(summary.sector_weights, summary.total_value):
            table.add_row(s.name, fmt_price(s.value), fmt_share(s.share))
        table.add_row(
            Text("Total", style="bold"),
            Text(fmt_price(summary.total_value), style="bold"),
            "",
        )
        self.console.print(table)

    def render_score(self, score: float) -> None:
        self.console.print(
            Text(
                f"Portfolio Diversity Score: {fmt_score(score)}",
                style=score_color(score),
            )
        )

    def render_error(self, message: str) -> None:
        self.console.print(Panel(message, title="Error", style="red"))
