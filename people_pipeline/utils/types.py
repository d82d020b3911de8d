"""Shared type definitions for the pipeline."""

from datetime import date
from decimal import Decimal

import pandas as pd


type Percentage = float | int | Decimal | str
type DateLike = date | str | pd.Timestamp
type DateRange = tuple[DateLike, DateLike]
type ReportSet = dict[str, pd.DataFrame]
type ValidationOutcome = dict[str, bool | str | list[str]]


def to_date(value: DateLike) -> date:
    """Coerce a date-like value (ISO string, Timestamp, datetime) to a plain date."""
    match value:
        case pd.Timestamp():
            return value.date()
        case str():
            return date.fromisoformat(value.strip()[:10])
        case date() if hasattr(value, "date"):
            return value.date()
        case date():
            return value
        case other:
            raise TypeError(f"Not a date: {other!r}")
