import logging

from infrastructure.cache.local_store import LocalStore

logger = logging.getLogger(__name__)


class FavoritesService:
	def __init__(self, cache: LocalStore):
		self.cache = cache
		self._favorites = cache.get_favorites()

	@property
	def favorites(self) -> list[str]:
		return list(self._favorites)

	def is_favorite(self, currency_code: str) -> bool:
		return currency_code in self._favorites

	async def toggle(self, currency_code: str) -> list[str]:
		if currency_code in self._favorites:
			self._favorites = [code for code in self._favorites if code != currency_code]
		else:
			self._favorites = [*self._favorites, currency_code]

		await self.cache.save_favorites(self._favorites)
		logger.info(f'Favorites now {self._favorites}')
		return self.favorites
