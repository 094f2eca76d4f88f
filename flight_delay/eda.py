# ---------------------------------------------
# Descriptive statistics over the raw flight data
# ---------------------------------------------

from __future__ import annotations

import pandas as pd

from flight_delay.config import DELAY_THRESHOLD
from flight_delay.features import to_number
from flight_delay.utils import hour_of_day


def departures(table: pd.DataFrame, origin: str) -> pd.DataFrame:
    """Non cancelled flights leaving ``origin`` with a numeric DepDelay."""
    flights = table[(table["Origin"] == origin) & (to_number(table["Cancelled"], "Cancelled") == 0)].copy()
    flights["DepDelay"] = pd.to_numeric(flights["DepDelay"], errors="coerce")
    flights["Month"] = to_number(flights["Month"], "Month")
    flights["hour"] = flights["CRSDepTime"].map(hour_of_day)
    return flights


def mean_delay_by_month(table, origin):
    return departures(table, origin).groupby("Month")["DepDelay"].mean()


def mean_delay_by_hour(table, origin):
    return departures(table, origin).groupby("hour")["DepDelay"].mean()


def delay_rate(table, origin, threshold=DELAY_THRESHOLD) -> float:
    delays = departures(table, origin)["DepDelay"].dropna()
    return float((delays >= threshold).mean()) if len(delays) else float("nan")
