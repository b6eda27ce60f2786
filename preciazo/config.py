"""Application configuration using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./preciazo.db"
    database_echo: bool = False

    # App Settings
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # Failed pages are saved here for template-change debugging
    debug_dump_enabled: bool = True
    debug_dump_path: str = "debug"

    # Cache lifetime of the approximate observation count
    stats_cache_seconds: int = 600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
