"""Configuration management for the odds harvester."""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing_extensions import Annotated

DEFAULT_SPORT_PAGES = ["football", "tennis", "basketball", "esports"]


class AppSettings(BaseSettings):
    """Application settings with dotenv support.

    Every field can be overridden by an environment variable of the same
    name (case insensitive) or by a `.env` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    # ===================
    # Leon API
    # ===================
    LEON_BASE_URL: str = Field(
        default='https://leonbets.com',
        description='Leon API base URL'
    )
    LEON_EVENTS_PATH: str = Field(
        default='/api-2/betline/events/all',
        description='Path of the league events listing'
    )
    LEON_EVENT_PATH: str = Field(
        default='/api-2/betline/event/all',
        description='Path of the single event detail'
    )
    LEON_LOCALE: str = Field(default='en-US', description='Locale tag sent as ctag')

    # ===================
    # HTTP Client
    # ===================
    TIMEOUT_S: float = Field(default=30.0, description='HTTP request timeout in seconds')
    USER_AGENT: str = Field(
        default='Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36',
        description='User agent for HTTP requests'
    )

    # ===================
    # Retry & Backoff
    # ===================
    RETRY_MAX: int = Field(default=3, ge=1, description='Total attempts per remote call')
    RETRY_BASE_DELAY: float = Field(default=1.0, ge=0, description='First backoff delay in seconds')

    # ===================
    # Pipeline
    # ===================
    SEED_DIR: Path = Field(default=Path('sport-pages'), description='Directory holding seed pages')
    SPORT_PAGES: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_SPORT_PAGES),
        description='Sport pages harvested per run, in report order'
    )
    WORKERS: int = Field(default=3, ge=1, description='Concurrent sport page workers')
    MATCHES_PER_LEAGUE: int = Field(default=2, ge=0, description='Events fetched in detail per league')

    # ===================
    # Report
    # ===================
    REPORT_PATH: Path = Field(default=Path('leon-report.txt'), description='Report output file')

    # ===================
    # Logging
    # ===================
    LOG_LEVEL: str = Field(default='INFO', description='Logging level')
    LOG_FORMAT: str = Field(default='text', description='Log format: json, text, or structured')
    LOG_FILE: Optional[Path] = Field(default=None, description='Log file path')

    @field_validator('SPORT_PAGES', mode='before')
    @classmethod
    def split_sport_pages(cls, v):
        """Accept a JSON list or a comma-separated string as well as a list."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith('['):
                return json.loads(v)
            return [page.strip() for page in v.split(',') if page.strip()]
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in ('json', 'text', 'structured'):
            raise ValueError(f"LOG_FORMAT must be json, text, or structured (got: {v})")
        return v_lower


@lru_cache()
def get_settings() -> AppSettings:
    """Get cached application settings.

    Loads settings from:
    1. Environment variables
    2. .env file (if exists)
    3. Default values

    Returns:
        AppSettings: Cached settings instance
    """
    return AppSettings()
