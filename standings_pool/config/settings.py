import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_SCORING_MODES = ["weighted", "distance"]


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Supabase Configuration
    supabase_url: Optional[str] = Field(
        None, description="URL for the Supabase project."
    )
    supabase_key: Optional[str] = Field(
        None, description="Anon key for the Supabase project."
    )
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key for Supabase (use with caution!)."
    )

    # Standings Feed
    espn_standings_url: str = Field(
        "https://site.api.espn.com/apis/v2/sports/basketball/nba/standings",
        description="Endpoint returning current league standings JSON.",
    )
    feed_user_agent: str = Field(
        "nba-confidence/1.0", description="User-Agent sent to the standings feed."
    )
    feed_timeout_seconds: float = Field(30.0, gt=0)
    min_feed_rows: int = Field(
        26,
        ge=0,
        description="Refuse to overwrite stored wins when the feed returns fewer rows.",
    )

    # Pool Configuration
    season: Optional[str] = Field(None, description="Season label, e.g. 2025-26.")
    scoring_mode: str = Field(
        "weighted", description="Default scoring mode (weighted or distance)."
    )
    cache_max_age_seconds: int = Field(
        60, ge=0, description="max-age for the public read endpoints."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def write_key(self) -> Optional[str]:
        """Key used for writes; the service role key wins when present."""
        return self.supabase_service_key or self.supabase_key


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in VALID_LOG_LEVELS:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper

        scoring_mode_lower = settings.scoring_mode.lower()
        if scoring_mode_lower not in VALID_SCORING_MODES:
            logging.warning(
                f"Invalid SCORING_MODE '{settings.scoring_mode}'. Using weighted."
            )
            settings.scoring_mode = "weighted"
        else:
            settings.scoring_mode = scoring_mode_lower
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
