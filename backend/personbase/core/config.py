from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "PersonBase"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API settings
    API_V1_STR: str = "/api/v1"

    # CORS settings. /snapshots/export returns every credential without a
    # password, so only list origins that may read all databases.
    BACKEND_CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000"
    ]

    # Storage
    STORAGE_PATH: str = "./data/personbase.db"
    REGISTRY_KEY: str = "databases"
    CONTENTS_KEY_PREFIX: str = "database_"

    # Record store limits
    MAX_PERSONS_PER_DATABASE: int = 2000

    # Pending edit/delete confirmations
    CONFIRMATION_TTL_MINUTES: int = 10

    # Labels used by tabular export and reports ("es" or "en")
    REPORT_LOCALE: str = "es"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PERSONBASE_",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
