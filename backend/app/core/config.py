from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_ENV: str = "development"
    CORS_ORIGINS: str = "http://localhost:4200"
    LOG_LEVEL: str = "INFO"

    # Alma users API
    ALMA_API_URL: str = "https://api-na.hosted.exlibrisgroup.com"
    ALMA_API_KEY: str = ""
    ALMA_TIMEOUT_SECONDS: float = 30.0

    # Import pipeline
    IMPORT_CHUNK_SIZE: int = 10
    MAX_ARRAY_INDEX: int = 99
    SETTINGS_PATH: str = "data/settings.json"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MB
    PREVIEW_ROWS: int = 5
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_IMPORTS: str = "10/minute"

    # Monitoring
    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",")]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
