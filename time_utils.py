# time_utils.py
from datetime import date, datetime, timezone


def utcnow() -> datetime:
     """Server-side 'now' in UTC (naive, canonical)."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


def utctoday() -> date:
     return utcnow().date()
