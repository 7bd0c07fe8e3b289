from typing import Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Identity provider (Appwrite)
	appwrite_endpoint: str | None = Field(default=None, validation_alias="APPWRITE_ENDPOINT")
	appwrite_project_id: str | None = Field(default=None, validation_alias="APPWRITE_PROJECT_ID")
	# Server key; only needed so session creation returns the session secret
	appwrite_api_key: str | None = Field(default=None, validation_alias="APPWRITE_API_KEY")

	# Avatar provider (Tavus)
	tavus_api_key: str | None = Field(default=None, validation_alias="TAVUS_API_KEY")
	tavus_base_url: str = Field(default="https://tavusapi.com/v2", validation_alias="TAVUS_BASE_URL")
	tavus_default_replica_id: str | None = Field(default=None, validation_alias="TAVUS_DEFAULT_REPLICA_ID")

	# Voice provider (ElevenLabs)
	elevenlabs_api_key: str | None = Field(default=None, validation_alias="ELEVENLABS_API_KEY")
	elevenlabs_base_url: str = Field(default="https://api.elevenlabs.io/v1", validation_alias="ELEVENLABS_BASE_URL")
	elevenlabs_default_voice_id: str = Field(default="2qfp6zPuviqeCOZIE9RZ", validation_alias="ELEVENLABS_DEFAULT_VOICE_ID")
	elevenlabs_model_id: str = Field(default="eleven_monolingual_v1", validation_alias="ELEVENLABS_MODEL_ID")

	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.0-flash", validation_alias="GEMINI_MODEL")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter fallback configuration (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="LingoPrep", validation_alias="OPENROUTER_TITLE")

	# Cookies
	session_cookie_name: str = Field(default="appwrite-session", validation_alias="SESSION_COOKIE_NAME")
	user_cookie_name: str = Field(default="user-data", validation_alias="USER_COOKIE_NAME")
	cookie_secure: bool = Field(default=False, validation_alias="COOKIE_SECURE")
	cookie_max_age_seconds: int = Field(default=60 * 60 * 24 * 30, validation_alias="COOKIE_MAX_AGE_SECONDS")

	upstream_timeout_seconds: float = Field(default=30, validation_alias="UPSTREAM_TIMEOUT_SECONDS")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	def missing_configuration(self) -> Dict[str, List[str]]:
		"""Return unset environment variables grouped by the service that needs them."""
		required = {
			"appwrite": {
				"APPWRITE_ENDPOINT": self.appwrite_endpoint,
				"APPWRITE_PROJECT_ID": self.appwrite_project_id,
				"APPWRITE_API_KEY": self.appwrite_api_key,
			},
			"tavus": {"TAVUS_API_KEY": self.tavus_api_key},
			"elevenlabs": {"ELEVENLABS_API_KEY": self.elevenlabs_api_key},
			"gemini": {"GEMINI_API_KEY": self.gemini_api_key},
		}
		missing: Dict[str, List[str]] = {}
		for service, values in required.items():
			names = [name for name, value in values.items() if not value]
			if names:
				missing[service] = names
		return missing

settings = Settings()
