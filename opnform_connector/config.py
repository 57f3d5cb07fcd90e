from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    # Server
    CORS_ORIGINS: str = "http://localhost:3000"

    # Observability
    LOG_JSON: bool = False

    # OpnForm
    OPNFORM_BASE_URL: str = "https://api.opnform.com"
    OPNFORM_INTEGRATION_ID: str = "activepieces"
    OPNFORM_TIMEOUT: float = 20.0

settings = Settings()
