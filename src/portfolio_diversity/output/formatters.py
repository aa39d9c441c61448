from portfolio_diversity.models.holding import Holding


def fmt_price(value: float | None) -> str:
    if value is None:
        return "N/A"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def fmt_score(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{decimals}f}"


def fmt_share(value: float | None, decimals: int = 1) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{decimals}f}%"


def holding_line(holding: Holding) -> str:
    return f"{holding.symbol} - {fmt_price(holding.price)} - {holding.sector}"


def score_color(score: float) -> str:
    if score >= 60:
        return "bold green"
    if score >= 30:
        return "yellow"
    return "red"
