# fundytrack/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    PROJECT_NAME: str = "FundyTrack API"
    API_V1_STR: str = "/api"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "fundytrack"
    POSTGRES_PASSWORD: str = "fundytrack"
    POSTGRES_DB: str = "fundytrack"

    DATABASE_URL: str | None = None # Overrides the POSTGRES_* parts when set

    # Identity gateway (performs the OAuth handshake and signs the assertion)
    IDENTITY_SHARED_SECRET: str = "change-me"
    IDENTITY_TOKEN_TTL_HOURS: int = 24 * 7

    # Application
    TIMEZONE: str = "UTC" # "today" and the current month are computed in this zone
    LOW_SPEND_THRESHOLD: float = 20.0
    FRONTEND_ORIGIN: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            if self.DATABASE_URL.startswith("postgresql://"):
                return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def allowed_origins(self) -> list[str]:
        return [origin for origin in {"http://localhost:5173", self.FRONTEND_ORIGIN} if origin]


@lru_cache() # Settings are read once per process
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
