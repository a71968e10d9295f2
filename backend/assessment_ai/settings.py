from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_TYPES = ("writing", "speaking", "recommendations")
ALLOWED_LEVELS = ("A0", "B1/B2", "IELTS")


class Settings(BaseSettings):
	gemini_api_key: Optional[str] = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-1.5-flash", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: Optional[str] = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# Generation parameters; low temperature keeps feedback stable between calls
	temperature: float = Field(default=0.3, validation_alias="GEMINI_TEMPERATURE")
	top_p: float = Field(default=0.8, validation_alias="GEMINI_TOP_P")
	max_output_tokens: int = Field(default=1000, validation_alias="GEMINI_MAX_OUTPUT_TOKENS")
	model_timeout_seconds: float = Field(default=30.0, validation_alias="MODEL_TIMEOUT_SECONDS")

	# Request limits
	max_input_length: int = Field(default=3000, validation_alias="MAX_INPUT_LENGTH")
	max_requests_per_hour: int = Field(default=60, validation_alias="MAX_REQUESTS_PER_HOUR")

	cors_allow_origins: List[str] = Field(default=["*"], validation_alias="CORS_ALLOW_ORIGINS")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True, frozen=True)

	@property
	def generation_config(self) -> dict:
		return {
			"temperature": self.temperature,
			"topP": self.top_p,
			"maxOutputTokens": self.max_output_tokens,
		}


settings = Settings()


def get_settings() -> Settings:
	return settings
