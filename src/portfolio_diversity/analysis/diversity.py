"""Sector aggregation and the Herfindahl-based diversity score.

The score is ``(1 - H) * 100`` where ``H`` is the sum of squared sector
shares of total value. A single-sector portfolio scores 0 and ``n`` equally
weighted sectors score ``100 * (1 - 1/n)``.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence

from portfolio_diversity.models.holding import Holding
from portfolio_diversity.models.portfolio import PortfolioSummary, SectorSlice

logger = logging.getLogger(__name__)


def compute_sector_weights(portfolio: Iterable[Holding]) -> dict[str, float]:
    """Sum ``price`` per sector label, keyed in first-appearance order.

    Labels are compared exactly; prices are not validated.
    """
    weights: dict[str, float] = {}
    for holding in portfolio:
        weights[holding.sector] = weights.get(holding.sector, 0.0) + holding.price
    return weights


def compute_diversity_score(
    sector_weights: Mapping[str, float], total_value: float
) -> float:
    """Return ``(1 - H) * 100`` for the given sector weights.

    ``total_value`` must be the sum of ``sector_weights``. A zero total
    (which includes the empty portfolio) scores 0 without dividing.
    """
    if total_value == 0:
        return 0.0

    hhi = sum((w / total_value) ** 2 for w in sector_weights.values())
    return (1 - hhi) * 100


def add_holding(portfolio: Sequence[Holding], holding: Holding) -> list[Holding]:
    """Return a new list with ``holding`` appended. The input is left as is."""
    return [*portfolio, holding]


def sector_slices(
    sector_weights: Mapping[str, float], total_value: float
) -> list[SectorSlice]:
    slices: list[SectorSlice] = []
    for name, value in sector_weights.items():
        share = (value / total_value) * 100 if total_value else None
        slices.append(SectorSlice(name=name, value=value, share=share))
    return slices


def summarize(portfolio: Iterable[Holding]) -> PortfolioSummary:
    holdings = list(portfolio)
    weights = compute_sector_weights(holdings)
    total_value = sum(h.price for h in holdings)
    score = compute_diversity_score(weights, total_value)
    logger.debug(
        "Scored %d holdings across %d sectors: %.2f",
        len(holdings),
        len(weights),
        score,
    )
    return PortfolioSummary(
        holdings_count=len(holdings),
        total_value=total_value,
        sector_weights=weights,
        diversity_score=score,
    )
