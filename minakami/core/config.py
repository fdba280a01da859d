from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Async SQLAlchemy URL. The store is a single embedded SQLite file.
    DATABASE_URL: str = "sqlite+aiosqlite:///./minakami.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False

    # Query timing (see minakami/services/performance.py)
    SLOW_QUERY_THRESHOLD_MS: float = 1000.0
    MAX_STORED_METRICS: int = 100

    # Comma-separated allowed origins, or "*" to allow all.
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
