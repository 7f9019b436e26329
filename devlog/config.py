from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    APP_NAME: str = "Devlog"
    DEBUG: bool = False

    # Feed source: http(s) URL, or a local path for development
    FEED_URL: str = "devlog-csv.csv"
    FETCH_TIMEOUT_SECONDS: float = 10.0
    CACHE_BUST: bool = True

    REFRESH_INTERVAL_SECONDS: int = 60
    BATCH_SIZE: int = 5
    ACTIVITY_LOG_SIZE: int = 200


settings = Settings()
