import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from domain.models.currency import Theme


class ExchangeRateResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	rate: float = Field(..., description='Units of to_currency per 1 from_currency')
	timestamp: dt.datetime = Field(..., description='Date the rate applies to')
	from_cache: bool = Field(..., description='Served from the local cache')
	is_live: bool = Field(..., description='Rate is less than 2 minutes old')
	is_stale: bool = Field(..., description='Rate is more than 10 minutes old')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'from_currency': 'USD',
				'to_currency': 'EUR',
				'rate': 0.92,
				'timestamp': '2024-01-15T00:00:00',
				'from_cache': False,
				'is_live': False,
				'is_stale': True,
			}
		}
	)


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	amount: float = Field(..., description='Amount requested')
	converted_amount: float = Field(..., description='amount * exchange_rate')
	exchange_rate: float = Field(..., description='Exchange rate used for conversion')
	timestamp: dt.datetime = Field(..., description='Date the rate applies to')
	from_cache: bool = Field(..., description='Rate served from the local cache')


class RatePointResponse(BaseModel):
	date: dt.date
	value: float


class HistoryResponse(BaseModel):
	from_currency: str
	to_currency: str
	points: list[RatePointResponse] = Field(description='Points in ascending date order')


class CurrencyResponse(BaseModel):
	code: str
	name: str | None = None


class SupportedCurrenciesResponse(BaseModel):
	currencies: list[CurrencyResponse] = Field(description='Supported currencies')


class PreferencesResponse(BaseModel):
	default_currency: str
	theme: Theme
	locale: str
	auto_refresh: bool


class FavoritesResponse(BaseModel):
	favorites: list[str] = Field(description='Favorite currency codes in insertion order')
