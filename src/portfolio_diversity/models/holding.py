from pydantic import BaseModel, ConfigDict

UNCLASSIFIED_SECTOR = "N/A"


class Holding(BaseModel):
    """A single stock entry. ``price`` is used as the weight of the entry."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    sector: str = UNCLASSIFIED_SECTOR
