from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

LIVE_WINDOW = timedelta(minutes=2)
STALE_AFTER = timedelta(minutes=10)


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass(frozen=True)
class ExchangeRate:
    """Units of ``to_currency`` for one unit of ``from_currency``."""

    rate: float
    timestamp: datetime
    from_currency: str
    to_currency: str

    @property
    def age(self) -> timedelta:
        return datetime.now() - self.timestamp

    @property
    def is_live(self) -> bool:
        return self.age < LIVE_WINDOW

    @property
    def is_stale(self) -> bool:
        return self.age > STALE_AFTER

    def to_dict(self) -> dict:
        return {
            "rate": self.rate,
            "timestamp": self.timestamp.isoformat(),
            "from_currency": self.from_currency,
            "to_currency": self.to_currency,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExchangeRate":
        return cls(
            rate=float(data["rate"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            from_currency=str(data["from_currency"]),
            to_currency=str(data["to_currency"]),
        )


@dataclass(frozen=True)
class RatePoint:
    date: date
    value: float

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "RatePoint":
        return cls(date=date.fromisoformat(data["date"]), value=float(data["value"]))


@dataclass(frozen=True)
class LatestRate:
    rate: ExchangeRate
    from_cache: bool


@dataclass(frozen=True)
class SupportedCurrency:
    code: str
    name: str | None
