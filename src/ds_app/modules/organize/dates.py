# src/ds_app/modules/organize/dates.py
from __future__ import annotations

from datetime import date, datetime


def local_day(value: date | datetime) -> date:
    """Calendar day in local time. Aware datetimes are converted, naive ones taken as local."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def format_date_key(value: date | datetime) -> str:
    day = local_day(value)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"
