from __future__ import annotations

from datetime import date
from typing import Iterable


def fahrenheit(x):
    return x * 1.8 + 32.0


def hour_of_day(time_code) -> int:
    """Hour part of a military time code such as 930 or "1730".

    2400 stays 24.
    """
    return int(str(int(float(time_code))).zfill(4)[:2])


def days_from_nearest_holiday(year: int, month: int, day: int, holidays: Iterable[date]) -> int:
    d = date(int(year), int(month), int(day))
    distances = [abs((d - h).days) for h in holidays]
    if not distances:
        raise ValueError("holiday calendar is empty")
    return min(distances)
