from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.models.currency import Theme


class PreferencesUpdateRequest(BaseModel):
	default_currency: str | None = Field(None, min_length=3, max_length=5)
	theme: Theme | None = None
	locale: str | None = Field(None, min_length=2, max_length=10)
	auto_refresh: bool | None = None

	model_config = ConfigDict(
		json_schema_extra={'example': {'default_currency': 'GBP', 'theme': 'dark'}}
	)

	@field_validator('default_currency')
	@classmethod
	def uppercase_currency(cls, v: str | None):
		return v.upper() if v else v
