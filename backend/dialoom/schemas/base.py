"""Field parsing helpers shared by request schemas."""

from datetime import time
import re

DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_HHMM_REGEX = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def ensure_date_only(value: object, field_name: str) -> object:
    if isinstance(value, str):
        candidate = value.strip()
        if not DATE_ONLY_REGEX.fullmatch(candidate):
            raise ValueError(f"{field_name} must be a YYYY-MM-DD date-only string")
        return candidate
    return value


def parse_hhmm(value: object) -> object:
    """Convert "HH:MM" strings to time objects; other values pass through."""
    if isinstance(value, str):
        match = TIME_HHMM_REGEX.fullmatch(value.strip())
        if not match:
            raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")
        return time(int(match.group(1)), int(match.group(2)))
    return value


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")
