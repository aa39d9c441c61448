import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from pydantic import TypeAdapter
from rich.console import Console
from rich.prompt import Prompt

from portfolio_diversity.analysis.diversity import summarize
from portfolio_diversity.config import API_KEY_ENV, AppConfig
from portfolio_diversity.data.finnhub_client import FinnhubClient
from portfolio_diversity.models.holding import Holding
from portfolio_diversity.models.portfolio import PortfolioSummary
from portfolio_diversity.output.renderer import PortfolioRenderer
from portfolio_diversity.session import PortfolioSession

logger = logging.getLogger(__name__)
console = Console()


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="portfolio-diversity",
        description="Stock portfolio diversity calculator",
    )
    sub = p.add_subparsers(dest="command")

    # --- fetch ---
    fetch = sub.add_parser("fetch", help="Fetch and list stock quotes")
    fetch.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of symbols to fetch (default: 30)",
    )
    _add_verbose(fetch)

    # --- score ---
    score = sub.add_parser("score", help="Score holdings from a JSON file")
    score.add_argument(
        "holdings_path",
        type=Path,
        help="JSON array of {symbol, price, sector} objects",
    )
    score.add_argument(
        "--chart-dir",
        type=Path,
        default=None,
        help="Write a sector pie chart to this directory",
    )
    _add_verbose(score)

    # --- analyze ---
    analyze = sub.add_parser(
        "analyze", help="Fetch quotes and score a portfolio of symbols"
    )
    analyze.add_argument("symbols", nargs="+", help="Symbols to add, in order")
    analyze.add_argument("--limit", type=int, default=None)
    analyze.add_argument("--chart-dir", type=Path, default=None)
    _add_verbose(analyze)

    # --- interactive ---
    interactive = sub.add_parser("interactive", help="Build a portfolio by prompt")
    interactive.add_argument("--limit", type=int, default=None)
    interactive.add_argument("--chart-dir", type=Path, default=None)
    _add_verbose(interactive)

    return p


def load_config() -> AppConfig:
    from dotenv import load_dotenv

    load_dotenv()
    return AppConfig(api_key=os.environ.get(API_KEY_ENV) or None)


def load_holdings(path: Path) -> list[Holding]:
    adapter = TypeAdapter(list[Holding])
    return adapter.validate_json(path.read_bytes())


def _write_chart(summary: PortfolioSummary, chart_dir: Path | None) -> None:
    if chart_dir is None:
        return
    from portfolio_diversity.output.charts import generate_sector_chart

    path = generate_sector_chart(summary, chart_dir)
    if path:
        console.print(f"[green]Chart saved to {path}[/green]")
    else:
        console.print("[yellow]No chart generated[/yellow]")


async def _fetch(session: PortfolioSession, limit: int | None) -> None:
    with console.status("[cyan]Fetching stocks..."):
        await session.fetch_stocks(limit)


async def fetch_session(config: AppConfig, limit: int | None) -> PortfolioSession:
    async with FinnhubClient(config) as client:
        session = PortfolioSession(client)
        await _fetch(session, limit)
        return session


def _run_fetch(args: argparse.Namespace, config: AppConfig) -> None:
    renderer = PortfolioRenderer(console)
    session = asyncio.run(fetch_session(config, args.limit))
    if session.error_message:
        renderer.render_error(session.error_message)
        sys.exit(1)
    renderer.render_stocks(session.stocks)


def _run_score(args: argparse.Namespace) -> None:
    path: Path = args.holdings_path
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        sys.exit(1)

    holdings = load_holdings(path)
    summary = summarize(holdings)
    renderer = PortfolioRenderer(console)
    renderer.render_portfolio(holdings, summary)
    _write_chart(summary, args.chart_dir)


def _run_analyze(args: argparse.Namespace, config: AppConfig) -> None:
    renderer = PortfolioRenderer(console)
    session = asyncio.run(fetch_session(config, args.limit))
    if session.error_message:
        renderer.render_error(session.error_message)
        sys.exit(1)

    for symbol in args.symbols:
        try:
            session.add_symbol(symbol)
        except KeyError:
            console.print(f"[yellow]{symbol} not in fetched stocks, skipped[/yellow]")

    renderer.render_portfolio(session.portfolio.holdings, session.summary)
    _write_chart(session.summary, args.chart_dir)


async def _interactive_loop(
    session: PortfolioSession, renderer: PortfolioRenderer, limit: int | None
) -> None:
    renderer.render_header()
    while True:
        choice = Prompt.ask(
            "[cyan]f[/cyan]etch, stock [cyan]#[/cyan] to add, [cyan]q[/cyan]uit",
            default="f",
        ).strip()

        if choice.lower() == "q":
            break
        if choice.lower() == "f":
            await _fetch(session, limit)
            if session.error_message:
                renderer.render_error(session.error_message)
                session.dismiss_error()
            else:
                renderer.render_stocks(session.stocks)
            continue
        if choice.isdigit() and 1 <= int(choice) <= len(session.stocks):
            session.add_to_portfolio(session.stocks[int(choice) - 1])
            renderer.render_portfolio(session.portfolio.holdings, session.summary)
            continue

        console.print(f"[yellow]Unrecognized choice: {choice}[/yellow]")


def _run_interactive(args: argparse.Namespace, config: AppConfig) -> None:
    renderer = PortfolioRenderer(console)

    async def run() -> PortfolioSession:
        async with FinnhubClient(config) as client:
            session = PortfolioSession(client)
            await _interactive_loop(session, renderer, args.limit)
            return session

    session = asyncio.run(run())
    _write_chart(session.summary, args.chart_dir)


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        if args.command == "score":
            _run_score(args)
        else:
            config = load_config()
            if args.command == "fetch":
                _run_fetch(args, config)
            elif args.command == "analyze":
                _run_analyze(args, config)
            elif args.command == "interactive":
                _run_interactive(args, config)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
