"""
Utilities package for the Clubhouse team manager.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import utcnow, to_iso, parse_iso, day_of, fmt_short_date, parse_day
from .identifiers import (
    EMAIL, PHONE, classify_identifier, digits_only, normalize_email, format_phone, new_id
)
from .config import AppConfig
from .constants import (
    APP_TITLE, SNAPSHOT_VERSION, DEFAULT_DATA_FILE, DEFAULT_SYNC_TIMEOUT_S,
    DEFAULT_TEAM_NAME, DEFAULT_SPORT, DEFAULT_JERSEY_COLORS,
    SPORT_POSITIONS, SPORT_NAMES, SECURITY_QUESTIONS,
    REASON_UNAVAILABLE, REASON_INJURED, REASON_SUSPENDED,
)

__all__ = [
    "utcnow", "to_iso", "parse_iso", "day_of", "fmt_short_date", "parse_day",
    "EMAIL", "PHONE", "classify_identifier", "digits_only", "normalize_email",
    "format_phone", "new_id", "AppConfig",
    "APP_TITLE", "SNAPSHOT_VERSION", "DEFAULT_DATA_FILE", "DEFAULT_SYNC_TIMEOUT_S",
    "DEFAULT_TEAM_NAME", "DEFAULT_SPORT", "DEFAULT_JERSEY_COLORS",
    "SPORT_POSITIONS", "SPORT_NAMES", "SECURITY_QUESTIONS",
    "REASON_UNAVAILABLE", "REASON_INJURED", "REASON_SUSPENDED",
]
