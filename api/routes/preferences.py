from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import get_favorites_service, get_local_store
from api.schemas import FavoritesResponse, PreferencesResponse, PreferencesUpdateRequest
from application.services import FavoritesService
from infrastructure.cache.local_store import LocalStore

router = APIRouter(prefix='/api', tags=['preferences'])


def _preferences(store: LocalStore) -> PreferencesResponse:
	return PreferencesResponse(
		default_currency=store.get_default_currency(),
		theme=store.get_theme(),
		locale=store.get_locale(),
		auto_refresh=store.get_auto_refresh(),
	)


@router.get('/preferences', response_model=PreferencesResponse, status_code=status.HTTP_200_OK)
async def get_preferences(
	store: Annotated[LocalStore, Depends(get_local_store)],
) -> PreferencesResponse:
	return _preferences(store)


@router.patch('/preferences', response_model=PreferencesResponse, status_code=status.HTTP_200_OK)
async def update_preferences(
	update: PreferencesUpdateRequest,
	store: Annotated[LocalStore, Depends(get_local_store)],
) -> PreferencesResponse:
	if update.default_currency is not None:
		await store.set_default_currency(update.default_currency)
	if update.theme is not None:
		await store.set_theme(update.theme)
	if update.locale is not None:
		await store.set_locale(update.locale)
	if update.auto_refresh is not None:
		await store.set_auto_refresh(update.auto_refresh)
	return _preferences(store)


@router.get('/favorites', response_model=FavoritesResponse, status_code=status.HTTP_200_OK)
async def get_favorites(
	service: Annotated[FavoritesService, Depends(get_favorites_service)],
) -> FavoritesResponse:
	return FavoritesResponse(favorites=service.favorites)


@router.post(
	'/favorites/{currency_code}/toggle',
	response_model=FavoritesResponse,
	status_code=status.HTTP_200_OK,
	summary='Add or remove a favorite currency',
)
async def toggle_favorite(
	currency_code: Annotated[str, Path(min_length=3, max_length=5)],
	service: Annotated[FavoritesService, Depends(get_favorites_service)],
) -> FavoritesResponse:
	favorites = await service.toggle(currency_code.upper())
	return FavoritesResponse(favorites=favorites)
