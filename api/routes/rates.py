from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_rates_repository
from api.schemas import (
	ConversionResponse,
	CurrencyResponse,
	ExchangeRateResponse,
	HistoryResponse,
	RatePointResponse,
	SupportedCurrenciesResponse,
)
from application.services import RatesRepository

router = APIRouter(prefix='/api', tags=['rates'])

CurrencyCode = Annotated[str, Path(min_length=3, max_length=5)]


@router.get(
	'/rate/{from_currency}/{to_currency}',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get latest exchange rate',
)
async def get_exchange_rate(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	repository: Annotated[RatesRepository, Depends(get_rates_repository)],
) -> ExchangeRateResponse:
	latest = await repository.get_latest_rate(from_currency.upper(), to_currency.upper())
	rate = latest.rate
	return ExchangeRateResponse(
		from_currency=rate.from_currency,
		to_currency=rate.to_currency,
		rate=rate.rate,
		timestamp=rate.timestamp,
		from_cache=latest.from_cache,
		is_live=rate.is_live,
		is_stale=rate.is_stale,
	)


@router.get(
	'/convert/{from_currency}/{to_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	amount: Annotated[float, Path(ge=0)],
	repository: Annotated[RatesRepository, Depends(get_rates_repository)],
) -> ConversionResponse:
	latest = await repository.get_latest_rate(from_currency.upper(), to_currency.upper())
	return ConversionResponse(
		from_currency=latest.rate.from_currency,
		to_currency=latest.rate.to_currency,
		amount=amount,
		converted_amount=amount * latest.rate.rate,
		exchange_rate=latest.rate.rate,
		timestamp=latest.rate.timestamp,
		from_cache=latest.from_cache,
	)


@router.get(
	'/history/{from_currency}/{to_currency}',
	response_model=HistoryResponse,
	status_code=status.HTTP_200_OK,
	summary='Get daily rates for the last N days',
)
async def get_history(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	repository: Annotated[RatesRepository, Depends(get_rates_repository)],
	days: Annotated[int, Query(ge=1, le=365)] = 7,
) -> HistoryResponse:
	from_currency = from_currency.upper()
	to_currency = to_currency.upper()
	points = await repository.get_historical_rates(from_currency, to_currency, days)
	return HistoryResponse(
		from_currency=from_currency,
		to_currency=to_currency,
		points=[RatePointResponse(date=p.date, value=p.value) for p in points],
	)


@router.get(
	'/currencies',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List supported currencies',
)
async def get_supported_currencies(
	repository: Annotated[RatesRepository, Depends(get_rates_repository)],
) -> SupportedCurrenciesResponse:
	currencies = await repository.get_supported_currencies()
	return SupportedCurrenciesResponse(
		currencies=[CurrencyResponse(code=c.code, name=c.name) for c in currencies]
	)
