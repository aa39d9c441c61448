from pydantic import BaseModel

FINNHUB_BASE_URL = "https://finnhub.io"
API_KEY_ENV = "FINNHUB_API_KEY"

# Pie wedge colours, cycled by sector index
SECTOR_COLORS: list[str] = [
    "#0088FE",
    "#00C49F",
    "#FFBB28",
    "#FF8042",
    "#AA336A",
    "#9933FF",
    "#33CC33",
    "#FF6666",
    "#FF3399",
    "#66CCFF",
    "#FF99CC",
]


class AppConfig(BaseModel):
    api_key: str | None = None
    base_url: str = FINNHUB_BASE_URL
    exchange: str = "US"

    symbol_limit: int = 30
    max_concurrency: int = 10
    timeout: float = 15.0
