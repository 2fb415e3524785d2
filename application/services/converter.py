import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, replace

from application.services.rates_repository import RatesRepository
from domain.exceptions.currency import RatesError
from domain.models.currency import ExchangeRate
from infrastructure.cache.local_store import LocalStore

logger = logging.getLogger(__name__)

Listener = Callable[['ConverterState'], None]


@dataclass(frozen=True)
class ConverterState:
	from_currency: str
	to_currency: str
	amount: float
	result: float | None = None
	rate: ExchangeRate | None = None
	is_loading: bool = False
	error: str | None = None
	from_cache: bool = False


class ConverterController:
	"""Conversion screen state.

	Every change produces a new ``ConverterState`` that is pushed to the
	subscribers. Whenever ``rate`` is set, ``result == amount * rate.rate``.
	"""

	def __init__(
		self,
		repository: RatesRepository,
		cache: LocalStore,
		to_currency: str = 'EUR',
		refresh_interval: float = 60,
	):
		self.repository = repository
		self.cache = cache
		self.refresh_interval = refresh_interval
		self._state = ConverterState(
			from_currency=cache.get_default_currency(),
			to_currency=to_currency,
			amount=1.0,
		)
		self._listeners: list[Listener] = []
		self._generation = 0
		self._refresh_task: asyncio.Task | None = None

	@property
	def state(self) -> ConverterState:
		return self._state

	def subscribe(self, listener: Listener) -> Callable[[], None]:
		"""Register ``listener``; it is called at once with the current state."""
		self._listeners.append(listener)
		listener(self._state)

		def unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return unsubscribe

	async def updates(self) -> AsyncIterator[ConverterState]:
		queue: asyncio.Queue[ConverterState] = asyncio.Queue()
		unsubscribe = self.subscribe(queue.put_nowait)
		try:
			while True:
				yield await queue.get()
		finally:
			unsubscribe()

	def _emit(self, state: ConverterState) -> None:
		self._state = state
		for listener in list(self._listeners):
			listener(state)

	async def load(self) -> None:
		self._generation += 1
		generation = self._generation
		from_currency = self._state.from_currency
		to_currency = self._state.to_currency

		self._emit(replace(self._state, is_loading=True, error=None))

		try:
			latest = await self.repository.get_latest_rate(from_currency, to_currency)
		except RatesError as e:
			self._apply_failure(generation, e.message)
			return
		except Exception as e:
			logger.exception(f'Unexpected failure loading {from_currency}->{to_currency}')
			self._apply_failure(generation, str(e))
			return

		if generation != self._generation:
			logger.debug(f'Dropping superseded result for {from_currency}->{to_currency}')
			return

		self._emit(
			replace(
				self._state,
				rate=latest.rate,
				result=self._state.amount * latest.rate.rate,
				is_loading=False,
				error=None,
				from_cache=latest.from_cache,
			)
		)

	def _apply_failure(self, generation: int, message: str) -> None:
		if generation != self._generation:
			return
		# last rate and result stay on screen
		self._emit(replace(self._state, is_loading=False, error=message))

	def set_amount(self, amount: float) -> None:
		state = replace(self._state, amount=amount)
		if state.rate is not None:
			state = replace(state, result=amount * state.rate.rate)
		self._emit(state)

	async def set_from_currency(self, currency: str) -> None:
		self._emit(replace(self._state, from_currency=currency))
		await self.load()

	async def set_to_currency(self, currency: str) -> None:
		self._emit(replace(self._state, to_currency=currency))
		await self.load()

	async def swap(self) -> None:
		self._emit(
			replace(
				self._state,
				from_currency=self._state.to_currency,
				to_currency=self._state.from_currency,
			)
		)
		await self.load()

	async def refresh(self) -> None:
		"""Reload the current pair. Goes through the cache like any load."""
		await self.load()

	def dismiss_error(self) -> None:
		if self._state.error is not None:
			self._emit(replace(self._state, error=None))

	def start_auto_refresh(self) -> bool:
		if not self.cache.get_auto_refresh():
			logger.debug('Auto-refresh disabled by preference')
			return False
		if self._refresh_task is None or self._refresh_task.done():
			self._refresh_task = asyncio.create_task(self._auto_refresh_loop())
		return True

	async def stop_auto_refresh(self) -> None:
		task, self._refresh_task = self._refresh_task, None
		if task is None:
			return
		task.cancel()
		try:
			await task
		except asyncio.CancelledError:
			pass

	async def _auto_refresh_loop(self) -> None:
		while True:
			await asyncio.sleep(self.refresh_interval)
			logger.debug(f'Auto-refresh {self._state.from_currency}->{self._state.to_currency}')
			await self.load()

	async def close(self) -> None:
		await self.stop_auto_refresh()
		self._listeners.clear()
