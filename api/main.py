import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.dependencies import cleanup_dependencies, init_dependencies
from api.error_handlers import register_exception_handlers
from api.routes import preferences, rates
from config.settings import get_settings
from infrastructure.monitoring.logger import setup_logging

logger = logging.getLogger(__name__)


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
	setup_logging(settings)
	logger.info(f'Starting {settings.APP_NAME}...')

	await init_dependencies()
	logger.info('Application ready')

	yield

	logger.info('Shutting down...')
	await cleanup_dependencies()


app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
	logger.error(f'Unhandled exception: {exc}', exc_info=True)
	return JSONResponse(status_code=500, content={'detail': 'Internal server error'})


@app.get('/health', tags=['health'])
async def health() -> dict:
	return {'status': 'ok', 'app': settings.APP_NAME}


app.include_router(rates.router)
app.include_router(preferences.router)
register_exception_handlers(app)
