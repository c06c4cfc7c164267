"""Local wall-clock helpers. Stored timestamps follow the business timezone, not UTC."""

from datetime import date, datetime

import pytz

from agenda.config import get_settings

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_timezone():
    return pytz.timezone(get_settings().TIMEZONE)


def local_now() -> datetime:
    """Current time in the configured timezone."""
    return datetime.now(get_timezone())


def local_timestamp() -> str:
    """Current local time as stored in the database."""
    return local_now().strftime(TIMESTAMP_FORMAT)


def get_current_date() -> date:
    """Get current date in the configured timezone."""
    return local_now().date()
