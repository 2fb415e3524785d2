import logging
from datetime import timedelta

from application.services import ConverterController, FavoritesService, RatesRepository
from config.settings import get_settings
from infrastructure.cache.local_store import LocalStore
from infrastructure.persistence import Database, KeyValueStore
from infrastructure.providers import FrankfurterProvider, RateSource

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	db: Database | None = None
	local_store: LocalStore | None = None
	rate_source: RateSource | None = None
	repository: RatesRepository | None = None
	favorites: FavoritesService | None = None


deps = AppDependencies()


async def init_dependencies() -> None:
	"""Open the local store and build the rates pipeline. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	deps.db = await Database.open(settings.DATABASE_URL)
	store = await KeyValueStore.create(deps.db)
	deps.local_store = LocalStore(
		store, freshness=timedelta(minutes=settings.RATE_FRESHNESS_MINUTES)
	)
	deps.rate_source = FrankfurterProvider(
		base_url=settings.API_BASE_URL, timeout=settings.HTTP_TIMEOUT_SECONDS
	)
	deps.repository = RatesRepository(source=deps.rate_source, cache=deps.local_store)
	deps.favorites = FavoritesService(deps.local_store)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.rate_source:
		await deps.rate_source.close()
	if deps.db:
		await deps.db.close()

	logger.info('Cleanup complete')


def get_local_store() -> LocalStore:
	if deps.local_store is None:
		raise RuntimeError('Local store not initialized')
	return deps.local_store


def get_rates_repository() -> RatesRepository:
	if deps.repository is None:
		raise RuntimeError('Rates repository not initialized')
	return deps.repository


def get_favorites_service() -> FavoritesService:
	if deps.favorites is None:
		raise RuntimeError('Favorites service not initialized')
	return deps.favorites


def create_converter() -> ConverterController:
	"""New conversion screen controller bound to the shared repository and store."""
	settings = get_settings()
	return ConverterController(
		get_rates_repository(),
		get_local_store(),
		to_currency=settings.DEFAULT_TO_CURRENCY,
		refresh_interval=settings.AUTO_REFRESH_INTERVAL_SECONDS,
	)
