import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.currency import NetworkError, RateLimitError, RatesError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(RateLimitError)
	async def rate_limit_handler(request: Request, exc: RateLimitError):
		return JSONResponse(status_code=429, content={'detail': exc.message})

	@app.exception_handler(NetworkError)
	async def network_error_handler(request: Request, exc: NetworkError):
		logger.warning(f'Upstream unreachable: {exc}')
		return JSONResponse(status_code=503, content={'detail': exc.message})

	@app.exception_handler(RatesError)
	async def rates_error_handler(request: Request, exc: RatesError):
		logger.error(f'Rates error: {exc}')
		return JSONResponse(status_code=502, content={'detail': exc.message})
