import logging
from datetime import date, datetime, timedelta

import httpx

from domain.exceptions.currency import (
    NetworkError,
    ParseError,
    RatesError,
    UnknownError,
)
from domain.models.currency import ExchangeRate, LatestRate, RatePoint, SupportedCurrency
from domain.models.currency_data import builtin_catalog, get_name
from infrastructure.cache.local_store import LocalStore
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)


class RatesRepository:
    """Cache first, then network, then whatever stale value the cache holds."""

    def __init__(self, source: RateSource, cache: LocalStore):
        self.source = source
        self.cache = cache

    async def get_latest_rate(self, from_currency: str, to_currency: str) -> LatestRate:
        if from_currency == to_currency:
            rate = ExchangeRate(
                rate=1.0,
                timestamp=datetime.now(),
                from_currency=from_currency,
                to_currency=to_currency,
            )
            return LatestRate(rate=rate, from_cache=False)

        # Any cached value wins, fresh or not; see is_fresh for the age check.
        cached = self.cache.get_rate(from_currency, to_currency)
        if cached is not None:
            logger.debug(f"Cache hit for {from_currency}->{to_currency}")
            return LatestRate(rate=cached, from_cache=True)

        try:
            response = await self.source.fetch_latest(from_currency, to_currency)
        except Exception as e:
            return self._serve_stale(from_currency, to_currency, e)

        rates = response.get("rates")
        if not rates:
            raise ParseError("No rates in response")

        try:
            rate = ExchangeRate(
                rate=float(rates[to_currency]),
                timestamp=datetime.fromisoformat(response["date"]),
                from_currency=from_currency,
                to_currency=to_currency,
            )
            await self.cache.save_rate(rate)
        except Exception as e:
            return self._serve_stale(from_currency, to_currency, e)

        logger.info(f"Fetched {from_currency}->{to_currency}: {rate.rate}")
        return LatestRate(rate=rate, from_cache=False)

    def _serve_stale(
        self, from_currency: str, to_currency: str, error: Exception
    ) -> LatestRate:
        stale = self.cache.get_rate(from_currency, to_currency)
        if stale is not None:
            logger.warning(
                f"Serving stale {from_currency}->{to_currency} after failure: {error}"
            )
            return LatestRate(rate=stale, from_cache=True)
        mapped = self._map_exception(error)
        if mapped is error:
            raise error
        raise mapped from error

    async def get_historical_rates(
        self, from_currency: str, to_currency: str, days: int
    ) -> list[RatePoint]:
        if from_currency == to_currency:
            today = date.today()
            return [
                RatePoint(date=today - timedelta(days=days - i - 1), value=1.0)
                for i in range(days)
            ]

        cached = self.cache.get_history(from_currency, to_currency)
        if cached:
            return cached

        end_date = date.today()
        start_date = end_date - timedelta(days=days)
        try:
            response = await self.source.fetch_history(
                from_currency, to_currency, start_date, end_date
            )
        except Exception as e:
            mapped = self._map_exception(e)
            if mapped is e:
                raise
            raise mapped from e

        points = self._parse_history(response, to_currency)
        if points:
            await self.cache.save_history(from_currency, to_currency, points)
        return points

    async def get_supported_currencies(self) -> list[SupportedCurrency]:
        try:
            currencies = await self.source.fetch_currencies()
        except RatesError as e:
            logger.warning(f"Falling back to built-in currency list: {e}")
            return builtin_catalog()
        return [
            SupportedCurrency(code=code, name=name or get_name(code))
            for code, name in currencies.items()
        ]

    def _parse_history(self, data: dict, to_currency: str) -> list[RatePoint]:
        rates = data.get("rates")
        if not isinstance(rates, dict):
            return []

        try:
            points = [
                RatePoint(date=date.fromisoformat(day), value=float(values[to_currency]))
                for day, values in rates.items()
            ]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed history payload for {to_currency}: {e}")
            return []

        return sorted(points, key=lambda point: point.date)

    @staticmethod
    def _map_exception(error: Exception) -> RatesError:
        if isinstance(error, RatesError):
            return error
        if isinstance(error, httpx.TransportError):
            return NetworkError(f"Network error: {error}")
        if isinstance(error, (KeyError, TypeError, ValueError)):
            return ParseError(f"Failed to parse response: {error}")
        return UnknownError(f"Unknown error: {error}")
