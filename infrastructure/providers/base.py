from abc import ABC, abstractmethod
from datetime import date


class RateSource(ABC):
    """Upstream exchange rate service returning raw JSON payloads."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def fetch_latest(self, from_currency: str, to_currency: str) -> dict:
        ...

    @abstractmethod
    async def fetch_history(
        self, from_currency: str, to_currency: str, start_date: date, end_date: date
    ) -> dict:
        ...

    @abstractmethod
    async def fetch_currencies(self) -> dict[str, str]:
        ...

    async def close(self) -> None:
        """Release the underlying HTTP client."""
