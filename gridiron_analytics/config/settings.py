"""Application settings and configuration management.

This file implements a centralized configuration system using Pydantic Settings.
It handles environment variables, default values, and configuration validation
for the film analytics engine, its HTTP API and its CLI.

Key Benefits:
- Type safety: All settings have defined types with validation
- Environment integration: Automatically loads from .env files
- Documentation: Clear descriptions of what each setting controls
- Injection: The analytics service takes a Settings instance, so tests can
  shrink timeouts without touching the environment

Configuration Sources (in priority order):
1. Environment variables (highest priority)
2. .env file values
3. Default values defined here (lowest priority)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Example Usage:
    - In code: `settings.database_url`
    - Environment variable: `DATABASE_URL=postgresql+asyncpg://user:pw@host/db`
    - .env file: `defensive_stats_timeout=5`
    """

    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env file in project root
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow DATABASE_URL or database_url
    )

    # API Configuration - FastAPI web server settings
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_reload: bool = False

    # Database Configuration - async SQLAlchemy connection settings
    # Any async driver URL works: sqlite+aiosqlite for local use,
    # postgresql+asyncpg for the hosted store.
    database_url: str = "sqlite+aiosqlite:///data/database/gridiron.db"
    database_echo: bool = False  # Log all SQL queries (True for debugging)

    # Analytics Configuration - bounds on fan-out latency (seconds)
    defensive_stats_timeout: float = 10.0  # Defensive category inside unified stats
    category_timeout: float = 10.0  # Any other per-player fan-out inside unified stats

    # Football constants used by the single-player profiles
    red_zone_yard_line: int = 80  # Yard line (own 0 .. opponent goal 100) where the red zone starts

    # Logging Configuration
    log_level: str = "INFO"  # Log level (DEBUG, INFO, WARNING, ERROR)


# Global settings instance - singleton pattern for application-wide configuration
# Example: from gridiron_analytics.config.settings import settings; print(settings.database_url)
settings = Settings()
