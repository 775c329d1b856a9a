from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

LOGGER = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%d/%m/%Y"
SECONDS_PER_DAY = 86400.0


def parse_date(value: Any, date_format: str = DEFAULT_DATE_FORMAT) -> date | None:
    """Parse a `DD/MM/YYYY` string (or date-like value); malformed input yields None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    parsed = pd.to_datetime(text, format=date_format, errors="coerce")
    if pd.isna(parsed):
        LOGGER.debug("Ignoring malformed date %r", text)
        return None
    return parsed.date()


def to_reference_timestamp(now: date | datetime | pd.Timestamp) -> pd.Timestamp:
    """Normalize the injected "now" to a naive timestamp comparable with record dates."""
    stamp = pd.Timestamp(now)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_localize(None)
    return stamp


def elapsed_days(start: pd.Series, end: pd.Series) -> pd.Series:
    """Whole days between two timestamp columns, rounded up; NaN where either side is missing."""
    elapsed = (end - start).dt.total_seconds() / SECONDS_PER_DAY
    return pd.Series(np.ceil(elapsed.to_numpy(dtype=float)), index=start.index, dtype=float)
