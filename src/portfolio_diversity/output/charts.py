from __future__ import annotations

import logging
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt

from portfolio_diversity.analysis.diversity import sector_slices
from portfolio_diversity.config import SECTOR_COLORS
from portfolio_diversity.models.portfolio import PortfolioSummary
from portfolio_diversity.output.formatters import fmt_score

matplotlib.use("Agg")

logger = logging.getLogger(__name__)

CHART_FILENAME = "sector_allocation.png"


def _save_figure(fig: plt.Figure, path: Path) -> None:
    fig.savefig(
        path,
        dpi=150,
        bbox_inches="tight",
        facecolor="white",
        edgecolor="none",
    )
    plt.close(fig)


def generate_sector_chart(summary: PortfolioSummary, output_dir: Path) -> Path | None:
    slices = sector_slices(summary.sector_weights, summary.total_value)
    if not slices:
        return None
    if any(s.value < 0 for s in slices):
        logger.warning("Negative sector weight, skipping pie chart")
        return None
    if summary.total_value <= 0:
        return None

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        fig, ax = plt.subplots(figsize=(8, 8))
        fig.suptitle(
            f"Sector Allocation — Diversity Score {fmt_score(summary.diversity_score)}",
            fontsize=14,
            fontweight="bold",
        )

        colors = [SECTOR_COLORS[i % len(SECTOR_COLORS)] for i in range(len(slices))]
        wedges, _ = ax.pie(
            [s.value for s in slices],
            colors=colors,
            startangle=90,
            counterclock=False,
        )
        ax.legend(
            wedges,
            [s.name for s in slices],
            loc="center left",
            bbox_to_anchor=(1.0, 0.5),
            fontsize=9,
        )
        ax.set_aspect("equal")

        path = output_dir / CHART_FILENAME
        _save_figure(fig, path)
        return path
    except Exception:
        logger.warning("Failed to generate sector chart", exc_info=True)
        return None
