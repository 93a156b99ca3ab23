"""
Centralized settings for the pricing engine and its API.

Values come from environment variables so the same code can serve
several organisations with different defaults.
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass(frozen=True)
class Settings:
    """Application settings with sensible defaults."""

    # Currency used when a pricing config does not name one
    default_currency: str = "EUR"

    # Organisation-wide VAT applied when a conference inherits it
    default_vat_percentage: Optional[float] = None

    # Days before the conference start at which late pricing begins
    # implicitly. None keeps late pricing explicit-only.
    late_window_days: Optional[int] = None

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Load settings from the environment (or any mapping)."""
        env = os.environ if environ is None else environ

        return cls(
            default_currency=env.get("PRICING_DEFAULT_CURRENCY", "EUR").strip().upper() or "EUR",
            default_vat_percentage=_optional_float(env.get("PRICING_DEFAULT_VAT")),
            late_window_days=_optional_int(env.get("PRICING_LATE_WINDOW_DAYS")),
            api_host=env.get("PRICING_API_HOST", "0.0.0.0"),
            api_port=int(env.get("PRICING_API_PORT", "8000")),
            log_level=env.get("PRICING_LOG_LEVEL", "INFO").upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None


def configure_logging(level: Optional[str] = None) -> None:
    """Basic logging setup for scripts and the API process."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format=LOG_FORMAT,
    )
