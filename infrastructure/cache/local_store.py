import json
import logging
import time
from datetime import timedelta

from domain.models.currency import ExchangeRate, RatePoint, Theme
from infrastructure.persistence.repositories.key_value import KeyValueStore

logger = logging.getLogger(__name__)

RATE_PREFIX = "rate_"
HISTORY_PREFIX = "history_"
FAVORITES_KEY = "favorites"
DEFAULT_CURRENCY_KEY = "default_currency"
THEME_KEY = "theme"
LOCALE_KEY = "locale"
AUTO_REFRESH_KEY = "auto_refresh"

DEFAULT_CURRENCY = "USD"
DEFAULT_THEME = Theme.SYSTEM
DEFAULT_LOCALE = "en"


class LocalStore:
    """Cached rates, cached history and user preferences.

    Reads are synchronous and served from the key/value mirror; writes are
    awaited so they reach disk before the caller continues. ``get_rate`` never
    checks freshness: callers that care must ask ``is_fresh`` themselves.
    """

    def __init__(self, store: KeyValueStore, freshness: timedelta = timedelta(minutes=5)):
        self.store = store
        self.freshness = freshness

    def _make_rate_key(self, from_currency: str, to_currency: str) -> str:
        return f"{RATE_PREFIX}{from_currency}_{to_currency}"

    def _make_history_key(self, from_currency: str, to_currency: str) -> str:
        return f"{HISTORY_PREFIX}{from_currency}_{to_currency}"

    # Rates

    async def save_rate(self, rate: ExchangeRate) -> None:
        key = self._make_rate_key(rate.from_currency, rate.to_currency)
        await self.store.set_many(
            {
                key: json.dumps(rate.to_dict()),
                f"{key}_timestamp": int(time.time() * 1000),
            }
        )
        logger.debug("Cached rate %s = %s", key, rate.rate)

    def get_rate(self, from_currency: str, to_currency: str) -> ExchangeRate | None:
        key = self._make_rate_key(from_currency, to_currency)
        data = self.store.get(key)
        if data is None:
            return None

        try:
            return ExchangeRate.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring corrupt cache entry %s: %s", key, e)
            return None

    def is_fresh(self, from_currency: str, to_currency: str) -> bool:
        key = self._make_rate_key(from_currency, to_currency)
        saved_at = self.store.get(f"{key}_timestamp")
        if not isinstance(saved_at, int):
            return False

        age_ms = int(time.time() * 1000) - saved_at
        return age_ms < self.freshness.total_seconds() * 1000

    # History

    async def save_history(
        self, from_currency: str, to_currency: str, history: list[RatePoint]
    ) -> None:
        key = self._make_history_key(from_currency, to_currency)
        await self.store.set(key, json.dumps([point.to_dict() for point in history]))

    def get_history(self, from_currency: str, to_currency: str) -> list[RatePoint]:
        key = self._make_history_key(from_currency, to_currency)
        data = self.store.get(key)
        if data is None:
            return []

        try:
            return [RatePoint.from_dict(item) for item in json.loads(data)]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring corrupt history entry %s: %s", key, e)
            return []

    # Preferences

    async def save_favorites(self, favorites: list[str]) -> None:
        await self.store.set(FAVORITES_KEY, list(favorites))

    def get_favorites(self) -> list[str]:
        favorites = self.store.get(FAVORITES_KEY)
        if not isinstance(favorites, list):
            return []
        return [str(code) for code in favorites]

    async def set_default_currency(self, currency: str) -> None:
        await self.store.set(DEFAULT_CURRENCY_KEY, currency)

    def get_default_currency(self) -> str:
        return self._get_str(DEFAULT_CURRENCY_KEY, DEFAULT_CURRENCY)

    async def set_theme(self, theme: Theme | str) -> None:
        await self.store.set(THEME_KEY, Theme(theme).value)

    def get_theme(self) -> Theme:
        try:
            return Theme(self._get_str(THEME_KEY, DEFAULT_THEME.value))
        except ValueError:
            return DEFAULT_THEME

    async def set_locale(self, locale: str) -> None:
        await self.store.set(LOCALE_KEY, locale)

    def get_locale(self) -> str:
        return self._get_str(LOCALE_KEY, DEFAULT_LOCALE)

    async def set_auto_refresh(self, auto_refresh: bool) -> None:
        await self.store.set(AUTO_REFRESH_KEY, bool(auto_refresh))

    def get_auto_refresh(self) -> bool:
        value = self.store.get(AUTO_REFRESH_KEY)
        return value if isinstance(value, bool) else True

    def _get_str(self, key: str, default: str) -> str:
        value = self.store.get(key)
        return value if isinstance(value, str) else default

    # Cleanup

    async def clear_all(self) -> None:
        """Erase everything, preferences included."""
        await self.store.clear()

    async def clear_rates_only(self) -> None:
        await self._clear_prefix(RATE_PREFIX)

    async def clear_history_only(self) -> None:
        await self._clear_prefix(HISTORY_PREFIX)

    async def _clear_prefix(self, prefix: str) -> None:
        keys = [key for key in self.store.keys() if key.startswith(prefix)]
        await self.store.remove(*keys)
        logger.info("Cleared %d keys with prefix %s", len(keys), prefix)
