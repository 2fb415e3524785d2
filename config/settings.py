from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	DATABASE_URL: str = 'sqlite+aiosqlite:///./fxnow.db'

	# Upstream rates service
	API_BASE_URL: str = 'https://api.frankfurter.app'
	HTTP_TIMEOUT_SECONDS: int = 10

	# Cache and refresh
	RATE_FRESHNESS_MINUTES: int = 5
	AUTO_REFRESH_INTERVAL_SECONDS: int = 60
	DEFAULT_TO_CURRENCY: str = 'EUR'

	# Logging
	LOG_DIRECTORY: str = 'logs'
	LOG_LEVEL: str = 'INFO'
	LOG_TO_FILE: bool = False

	# Application
	APP_NAME: str = 'FX Now'
	DEBUG: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
