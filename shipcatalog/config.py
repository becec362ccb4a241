from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = "sqlite:///./shipcatalog.db"
    LOG_LEVEL: str = "INFO"
    VERSION: str = "0.1.0"
    # Ships loaded by `shipcatalog seed` when no --file is given
    SEED_FILE: str = "config/ships.yaml"
    # Page size used by GET /ships when pageSize is omitted
    DEFAULT_PAGE_SIZE: int = 3
    # Connection pool (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    # CORS origins (comma-separated string for env var support)
    CORS_ORIGINS: str = "http://localhost:5173"


settings = Settings()
