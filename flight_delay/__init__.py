"""Flight departure delay analysis and classification."""

from flight_delay.features import align, encode
from flight_delay.ingest import read_table
from flight_delay.metrics import MetricsVector, compute_metrics
from flight_delay.utils import days_from_nearest_holiday, fahrenheit, hour_of_day

__version__ = "0.1.0"

__all__ = [
    "MetricsVector",
    "align",
    "compute_metrics",
    "days_from_nearest_holiday",
    "encode",
    "fahrenheit",
    "hour_of_day",
    "read_table",
]
