"""Jobs that build the per-year feature matrix.

A feature job joins one year of flights departing from an origin airport
with that airport's daily weather and writes a headerless CSV dataset in
``FEATURE_COLUMNS`` order. The pipeline waits for the job and then reads its
output; a failed job raises :class:`FeatureJobError` and nothing is read.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from flight_delay.config import (FEATURE_COLUMNS, WEATHER_COLUMNS, WEATHER_METRICS,
                                 PipelineConfig)
from flight_delay.exceptions import FeatureJobError, FlightDelayError
from flight_delay.features import to_number
from flight_delay.filesystem import FileSystem, LocalFileSystem
from flight_delay.ingest import read_table
from flight_delay.utils import days_from_nearest_holiday, hour_of_day

logger = logging.getLogger(__name__)


class FeatureJob(ABC):
    @abstractmethod
    def run(self, year: int, origin: str) -> str:
        """Build the feature matrix for ``year`` and return its path."""
        raise NotImplementedError


class PigFeatureJob(FeatureJob):
    """Runs a Pig script on the cluster and blocks until it exits."""

    def __init__(self, script: str, config: PipelineConfig, pig: str = "pig",
                 exec_type: str = "mapreduce", extra_params: Optional[Dict[str, str]] = None):
        self.script = script
        self.config = config
        self.pig = pig
        self.exec_type = exec_type
        self.extra_params = dict(extra_params or {})

    def command(self, year: int, origin: str) -> List[str]:
        params = {
            "year": str(year),
            "origin": origin,
            "station": self.config.station,
            "flights": self.config.raw_for(year),
            "weather": self.config.weather_for(year),
            "output": self.config.features_for(year),
        }
        params.update(self.extra_params)
        cmd = [self.pig, "-x", self.exec_type]
        for key, value in params.items():
            cmd += ["-param", f"{key}={value}"]
        return cmd + ["-f", self.script]

    def run(self, year, origin):
        cmd = self.command(year, origin)
        logger.info("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise FeatureJobError(year, origin, str(exc)) from exc
        if result.returncode != 0:
            tail = "\n".join(result.stderr.strip().splitlines()[-10:])
            raise FeatureJobError(year, origin, f"exit status {result.returncode}\n{tail}")
        return self.config.features_for(year)


class LocalFeatureJob(FeatureJob):
    """The same join done with pandas, for data that fits in memory."""

    def __init__(self, config: PipelineConfig, fs: Optional[FileSystem] = None):
        self.config = config
        self.fs = fs or LocalFileSystem()

    def weather(self, year: int) -> pd.DataFrame:
        table = read_table(self.config.weather_for(year), names=WEATHER_COLUMNS, fs=self.fs)
        table = table[(table["station"] == self.config.station) & table["metric"].isin(list(WEATHER_METRICS))]
        if table.empty:
            return pd.DataFrame(columns=["date", *WEATHER_METRICS.values()])
        daily = table.drop_duplicates(["date", "metric"]).pivot(index="date", columns="metric", values="value")
        daily = daily.rename(columns=WEATHER_METRICS).reindex(columns=list(WEATHER_METRICS.values()))
        return daily.reset_index()

    def build(self, year: int, origin: str) -> pd.DataFrame:
        raw = read_table(self.config.raw_for(year), fs=self.fs)
        flights = raw[(raw["Origin"] == origin) & (to_number(raw["Cancelled"], "Cancelled") == 0)]

        fm = pd.DataFrame({
            "delay": flights["DepDelay"],
            "month": flights["Month"],
            "day": flights["DayofMonth"],
            "dow": flights["DayOfWeek"],
            "hour": flights["CRSDepTime"].map(hour_of_day),
            "distance": flights["Distance"],
            "carrier": flights["UniqueCarrier"],
            "dest": flights["Dest"],
            "days_from_holiday": [
                days_from_nearest_holiday(y, m, d, self.config.holidays)
                for y, m, d in zip(flights["Year"], flights["Month"], flights["DayofMonth"])
            ],
        })
        fm["date"] = [f"{int(y):04d}{int(m):02d}{int(d):02d}"
                      for y, m, d in zip(flights["Year"], flights["Month"], flights["DayofMonth"])]

        # Inner join: days without a full set of weather readings are dropped
        joined = fm.merge(self.weather(year), on="date", how="inner")
        joined = joined.dropna(subset=list(WEATHER_METRICS.values()))
        logger.info("Joined %d of %d %s departures with weather for %d",
                    len(joined), len(fm), origin, year)
        return joined[FEATURE_COLUMNS]

    def run(self, year, origin):
        try:
            matrix = self.build(year, origin)
        except (FlightDelayError, KeyError, ValueError) as exc:
            raise FeatureJobError(year, origin, str(exc)) from exc

        output = Path(self.config.features_for(year))
        # Output holds only this run's parts
        if output.exists():
            shutil.rmtree(output)
        output.mkdir(parents=True)
        with open(output / "part-00000", "w", newline="") as handle:
            matrix.to_csv(handle, header=False, index=False)
        return str(output)
