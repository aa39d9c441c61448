from pydantic import BaseModel


class SectorSlice(BaseModel):
    name: str
    value: float
    share: float | None = None


class PortfolioSummary(BaseModel):
    holdings_count: int = 0
    total_value: float = 0.0
    sector_weights: dict[str, float] = {}
    diversity_score: float = 0.0
