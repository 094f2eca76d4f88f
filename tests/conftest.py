from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from flight_delay.config import RAW_COLUMNS, PipelineConfig
from flight_delay.jobs import FeatureJob

FIXTURES = Path(__file__).parent / "fixtures"

CARRIERS = ["AA", "UA", "WN", "DL"]
DESTS = ["LAX", "JFK", "SFO", "ATL", "DEN", "BOS"]


def make_flights(year, n=200, seed=0):
    rng = np.random.RandomState(seed)
    rows = []
    for i in range(n):
        month = rng.randint(1, 13)
        day = rng.randint(1, 29)
        hour = rng.randint(5, 23)
        dep_delay = int(rng.randint(-10, 20) + (hour - 5) * 2)
        row = dict.fromkeys(RAW_COLUMNS, "")
        row.update({
            "Year": str(year),
            "Month": str(month),
            "DayofMonth": str(day),
            "DayOfWeek": str(rng.randint(1, 8)),
            "CRSDepTime": str(hour * 100 + 30),
            "UniqueCarrier": CARRIERS[i % len(CARRIERS)],
            "DepDelay": str(dep_delay),
            "Origin": "ORD" if i % 5 else "MDW",
            "Dest": DESTS[rng.randint(0, len(DESTS))],
            "Distance": str(rng.randint(200, 2000)),
            "Cancelled": "1" if i % 17 == 0 else "0",
        })
        rows.append(row)
    return pd.DataFrame(rows, columns=RAW_COLUMNS)


def make_weather(year, station="USW00094846"):
    rows = []
    for date in pd.date_range(f"{year}-01-01", f"{year}-12-31"):
        key = date.strftime("%Y%m%d")
        for metric, value in [("TMIN", -50), ("TMAX", 100), ("PRCP", 3), ("SNOW", 0), ("AWND", 45)]:
            rows.append([station, key, metric, str(value), "", "", "0", ""])
        rows.append(["USC00110000", key, "TMAX", "999", "", "", "0", ""])
    return rows


@pytest.fixture
def workspace(tmp_path):
    """Raw flights and weather for 2007 and 2008 laid out as part files."""
    for year, seed in [(2007, 1), (2008, 2)]:
        raw = tmp_path / "delay" / str(year)
        raw.mkdir(parents=True)
        flights = make_flights(year, seed=seed)
        flights.iloc[:120].to_csv(raw / "part-00000", index=False)
        flights.iloc[120:].to_csv(raw / "part-00001", index=False)
        (raw / "_SUCCESS").write_text("")

        weather = tmp_path / "weather" / str(year)
        weather.mkdir(parents=True)
        lines = [",".join(row) for row in make_weather(year)]
        (weather / "part-00000").write_text("\n".join(lines) + "\n")
    return tmp_path


@pytest.fixture
def config(workspace):
    return PipelineConfig(
        raw_path=str(workspace / "delay" / "{year}"),
        weather_path=str(workspace / "weather" / "{year}"),
        features_path=str(workspace / "fm" / "ord_{year}"),
        params={
            "random_forest": {"n_estimators": 10, "random_state": 0},
            "gradient_boosting": {"n_estimators": 10, "max_depth": 3, "random_state": 0},
            "xgboost": {"n_estimators": 10, "max_depth": 3, "random_state": 0},
        },
    )


class RecordedFeatureJob(FeatureJob):
    """Stands in for the join job with feature matrices recorded on disk."""

    def __init__(self, paths):
        self.paths = paths
        self.calls = []

    def run(self, year, origin):
        self.calls.append((year, origin))
        return str(self.paths[year])


@pytest.fixture
def recorded_job():
    return RecordedFeatureJob({2007: FIXTURES / "features_2007", 2008: FIXTURES / "features_2008"})
