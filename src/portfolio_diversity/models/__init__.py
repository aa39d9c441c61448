from portfolio_diversity.models.holding import UNCLASSIFIED_SECTOR, Holding
from portfolio_diversity.models.portfolio import PortfolioSummary, SectorSlice

__all__ = [
    "UNCLASSIFIED_SECTOR",
    "Holding",
    "PortfolioSummary",
    "SectorSlice",
]
