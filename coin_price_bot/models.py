from dataclasses import dataclass
from datetime import datetime, timedelta

LAMPORTS_PER_SOL = 1_000_000_000


@dataclass(frozen=True)
class PriceQuote:
    symbol: str
    price: float
    source: str
    fetched_at: datetime


@dataclass(frozen=True)
class CollectionStats:
    symbol: str
    floor_price: int            # lamports
    listed_count: int
    volume_all: float = 0.0

    @property
    def floor_price_sol(self) -> float:
        return self.floor_price / LAMPORTS_PER_SOL


@dataclass(frozen=True)
class NotificationSetting:
    enabled: bool
    interval: timedelta
