from .requests import PreferencesUpdateRequest
from .responses import (
	ConversionResponse,
	CurrencyResponse,
	ExchangeRateResponse,
	FavoritesResponse,
	HistoryResponse,
	PreferencesResponse,
	RatePointResponse,
	SupportedCurrenciesResponse,
)

__all__ = [
	'PreferencesUpdateRequest',
	'ConversionResponse',
	'CurrencyResponse',
	'ExchangeRateResponse',
	'FavoritesResponse',
	'HistoryResponse',
	'PreferencesResponse',
	'RatePointResponse',
	'SupportedCurrenciesResponse',
]
