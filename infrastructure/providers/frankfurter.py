import asyncio
import logging
from datetime import date

import httpx

from domain.exceptions.currency import (
	NetworkError,
	ParseError,
	RateLimitError,
	ServerError,
	UnknownError,
)
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)


class FrankfurterProvider(RateSource):
	BASE_URL = 'https://api.frankfurter.app'

	def __init__(
		self,
		base_url: str | None = None,
		client: httpx.AsyncClient | None = None,
		timeout: int = 10,
	):
		self.base_url = (base_url or self.BASE_URL).rstrip('/')
		self.timeout = timeout
		self._client = client or httpx.AsyncClient(
			timeout=httpx.Timeout(timeout),
			headers={'Accept': 'application/json'},
		)

	@property
	def name(self) -> str:
		return 'frankfurter'

	async def _request(self, endpoint: str, params: dict | None = None) -> dict:
		url = f'{self.base_url}/{endpoint}'
		logger.debug(f'GET {url} params={params}')

		try:
			response = await self._client.get(url, params=params or {})
			response.raise_for_status()
		except httpx.HTTPStatusError as e:
			status_code = e.response.status_code
			if status_code == 429:
				logger.warning(f'{self.name} rate limit hit on /{endpoint}')
				raise RateLimitError() from e
			logger.error(f'{self.name} HTTP error {status_code} on /{endpoint}')
			raise ServerError(status_code) from e
		except (httpx.TimeoutException, httpx.NetworkError) as e:
			logger.warning(f'{self.name} request failed: {e.__class__.__name__}')
			raise NetworkError(f'Network error: {e.__class__.__name__}') from e
		except httpx.RequestError as e:
			logger.error(f'{self.name} request failed: {e.__class__.__name__}')
			raise UnknownError(f'Unknown error: {e.__class__.__name__}') from e
		except asyncio.CancelledError:
			logger.info(f'{self.name} request to /{endpoint} cancelled')
			raise

		try:
			data = response.json()
		except ValueError as e:
			raise ParseError(f'{self.name} response parsing error: {e}') from e

		if not isinstance(data, dict):
			raise ParseError(f'{self.name} returned non-object JSON')
		return data

	async def fetch_latest(self, from_currency: str, to_currency: str) -> dict:
		return await self._request('latest', {'from': from_currency, 'to': to_currency})

	async def fetch_history(
		self, from_currency: str, to_currency: str, start_date: date, end_date: date
	) -> dict:
		endpoint = f'{start_date:%Y-%m-%d}..{end_date:%Y-%m-%d}'
		return await self._request(endpoint, {'from': from_currency, 'to': to_currency})

	async def fetch_currencies(self) -> dict[str, str]:
		data = await self._request('currencies')
		return {str(code): str(name) for code, name in data.items()}

	async def close(self) -> None:
		await self._client.aclose()
