# ---------------------------------------------
# Feature encoding for the delay classifiers
# ---------------------------------------------

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from flight_delay.config import DELAY_THRESHOLD, FEATURE_SCHEMA, LABEL, REST, TOP_K
from flight_delay.exceptions import CoercionError
from flight_delay.utils import fahrenheit

logger = logging.getLogger(__name__)


def _strip(series: pd.Series) -> pd.Series:
    if series.dtype != object:
        return series
    return series.map(lambda v: v.strip() if isinstance(v, str) else v)


def to_number(series: pd.Series, column: str) -> pd.Series:
    """Parse a text column as numbers; empty cells become NaN."""
    values = _strip(series).replace("", np.nan)
    numbers = pd.to_numeric(values, errors="coerce")
    bad = numbers.isna() & values.notna()
    if bad.any():
        raise CoercionError(column, values[bad].unique())
    return numbers


def collapse_top_k(series: pd.Series, k: int = TOP_K) -> pd.Series:
    """Keep the k most frequent values and replace the others with "rest".

    Ties in frequency are broken by value, in ascending string order.
    """
    counts = series.value_counts()
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
    keep = {value for value, _ in ranked[:k]}
    return series.where(series.isin(keep), REST)


def one_hot(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    # Indicator columns are named <column>_<value>
    return pd.get_dummies(table, columns=list(columns), prefix=list(columns), dtype=bool)


def encode(table: pd.DataFrame, top_k: int = TOP_K, schema=FEATURE_SCHEMA,
           threshold: int = DELAY_THRESHOLD) -> pd.DataFrame:
    names = [name for name, _ in schema]
    missing = [name for name in names if name not in table.columns]
    if missing:
        raise ValueError(f"table is missing columns: {missing}")

    data = table[names].copy()
    label = next(name for name, kind in schema if kind == "label")

    # Rows without a usable delay value are dropped
    delay = pd.to_numeric(_strip(data[label]), errors="coerce")
    keep = delay.notna()
    if (~keep).any():
        logger.info("Dropping %d rows without a %s value", int((~keep).sum()), label)
    data = data[keep].reset_index(drop=True)
    data[label] = (delay[keep] >= threshold).to_numpy()

    categories: List[str] = []
    for name, kind in schema:
        if kind in ("int", "float"):
            data[name] = to_number(data[name], name)
        elif kind == "temperature":
            data[name] = fahrenheit(to_number(data[name], name) / 10.0)
        elif kind == "category":
            data[name] = collapse_top_k(data[name], top_k)
            categories.append(name)

    data = one_hot(data, categories)
    logger.info("Encoded %d rows into %d columns", len(data), len(data.columns))
    return data


def align(train: pd.DataFrame, test: pd.DataFrame, label: str = LABEL) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Project both tables onto the columns they share.

    One-hot columns for categories seen in only one of the tables are lost.
    """
    shared = set(test.columns)
    columns = [c for c in train.columns if c in shared]
    if label not in columns:
        raise KeyError(f"label column {label!r} missing from train or test table")

    dropped = sorted(set(train.columns).symmetric_difference(shared))
    if dropped:
        logger.info("Alignment dropped %d columns: %s", len(dropped), ", ".join(dropped))
    return train[columns].copy(), test[columns].copy()


def split_xy(table: pd.DataFrame, label: str = LABEL) -> Tuple[pd.DataFrame, pd.Series]:
    return table.drop(columns=[label]), table[label]
