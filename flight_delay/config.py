# ---------------------------------------------
# Configuration data for the delay pipeline
# ---------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Tuple

# US holidays for the years covered by the dataset
HOLIDAYS = (
    date(2007, 1, 1), date(2007, 1, 15), date(2007, 2, 19), date(2007, 5, 28),
    date(2007, 6, 7), date(2007, 7, 4), date(2007, 9, 3), date(2007, 10, 8),
    date(2007, 11, 11), date(2007, 11, 22), date(2007, 12, 25),
    date(2008, 1, 1), date(2008, 1, 21), date(2008, 2, 18), date(2008, 5, 22),
    date(2008, 5, 26), date(2008, 7, 4), date(2008, 9, 1), date(2008, 10, 13),
    date(2008, 11, 11), date(2008, 11, 27), date(2008, 12, 25),
)

# ---------- Raw on-time performance data ----------
RAW_COLUMNS = [
    "Year", "Month", "DayofMonth", "DayOfWeek", "DepTime", "CRSDepTime",
    "ArrTime", "CRSArrTime", "UniqueCarrier", "FlightNum", "TailNum",
    "ActualElapsedTime", "CRSElapsedTime", "AirTime", "ArrDelay", "DepDelay",
    "Origin", "Dest", "Distance", "TaxiIn", "TaxiOut", "Cancelled",
    "CancellationCode", "Diverted", "CarrierDelay", "WeatherDelay",
    "NASDelay", "SecurityDelay", "LateAircraftDelay",
]

# GHCN daily records: station, yyyymmdd, element, value, flags...
WEATHER_COLUMNS = ["station", "date", "metric", "value", "t1", "t2", "t3", "time"]
WEATHER_METRICS = {
    "TMIN": "origin_tmin",
    "TMAX": "origin_tmax",
    "PRCP": "origin_prcp",
    "SNOW": "origin_snow",
    "AWND": "origin_wind",
}

# ---------- Feature matrix written by the join job ----------
FEATURE_COLUMNS = [
    "delay", "month", "day", "dow", "hour", "distance", "carrier", "dest",
    "days_from_holiday", "origin_tmin", "origin_tmax", "origin_prcp",
    "origin_snow", "origin_wind",
]

LABEL = "delay"
REST = "rest"
DELAY_THRESHOLD = 15
TOP_K = 25

# (name, kind) in column order; kinds: label, int, float, temperature, category
FEATURE_SCHEMA: List[Tuple[str, str]] = [
    ("delay", "label"),
    ("month", "int"),
    ("day", "int"),
    ("dow", "int"),
    ("hour", "int"),
    ("distance", "float"),
    ("carrier", "category"),
    ("dest", "category"),
    ("days_from_holiday", "int"),
    ("origin_tmin", "temperature"),
    ("origin_tmax", "temperature"),
    ("origin_prcp", "float"),
    ("origin_snow", "float"),
    ("origin_wind", "float"),
]

# ---------- Model hyperparameters ----------
RF_PARAMS = {"n_estimators": 50, "max_depth": None, "min_samples_leaf": 1,
             "n_jobs": -1, "random_state": 42}
GBM_PARAMS = {"n_estimators": 100, "max_depth": 5, "learning_rate": 0.1,
              "subsample": 0.8, "min_samples_leaf": 10, "random_state": 42}
XGB_PARAMS = {"n_estimators": 200, "max_depth": 5, "learning_rate": 0.1,
              "random_state": 42, "eval_metric": "logloss"}

DEFAULT_PARAMS = {
    "random_forest": RF_PARAMS,
    "gradient_boosting": GBM_PARAMS,
    "xgboost": XGB_PARAMS,
}


@dataclass
class PipelineConfig:
    """Everything one run of the pipeline needs.

    Path templates are formatted with ``year``.
    """

    raw_path: str = "data/airline/delay/{year}"
    weather_path: str = "data/airline/weather/{year}"
    features_path: str = "data/airline/fm/ord_{year}"
    origin: str = "ORD"
    station: str = "USW00094846"
    train_year: int = 2007
    test_year: int = 2008
    top_k: int = TOP_K
    threshold: int = DELAY_THRESHOLD
    models: List[str] = field(default_factory=lambda: ["random_forest", "gradient_boosting"])
    workers: int = 1
    holidays: Tuple[date, ...] = HOLIDAYS
    params: Dict[str, dict] = field(default_factory=lambda: {k: dict(v) for k, v in DEFAULT_PARAMS.items()})

    def raw_for(self, year: int) -> str:
        return self.raw_path.format(year=year)

    def weather_for(self, year: int) -> str:
        return self.weather_path.format(year=year)

    def features_for(self, year: int) -> str:
        return self.features_path.format(year=year)
