from __future__ import annotations

from typing import Dict, Iterable, NamedTuple, Tuple

import numpy as np
from sklearn.metrics import accuracy_score, confusion_matrix, precision_score, recall_score


class MetricsVector(NamedTuple):
    precision: float
    recall: float
    f1: float
    accuracy: float


def _as_labels(predicted, actual):
    predicted = np.asarray(predicted).astype(bool)
    actual = np.asarray(actual).astype(bool)
    if len(predicted) != len(actual):
        raise ValueError(f"length mismatch: {len(predicted)} predictions for {len(actual)} labels")
    return predicted, actual


def confusion_counts(predicted, actual) -> Tuple[int, int, int, int]:
    """Return (tp, tn, fp, fn) for two equal length boolean sequences."""
    predicted, actual = _as_labels(predicted, actual)
    if not len(actual):
        return 0, 0, 0, 0
    tn, fp, fn, tp = confusion_matrix(actual, predicted, labels=[False, True]).ravel()
    return int(tp), int(tn), int(fp), int(fn)


def compute_metrics(predicted, actual) -> MetricsVector:
    # Undefined ratios are reported as NaN rather than raised
    predicted, actual = _as_labels(predicted, actual)
    if not len(actual):
        return MetricsVector(*[float("nan")] * 4)

    precision = float(precision_score(actual, predicted, zero_division=np.nan))
    recall = float(recall_score(actual, predicted, zero_division=np.nan))
    # f1_score gives 0 when precision and recall are both 0; keep it NaN
    f1 = 2 * precision * recall / (precision + recall) if precision + recall else float("nan")
    accuracy = float(accuracy_score(actual, predicted))
    return MetricsVector(precision, recall, f1, accuracy)


def format_report(results: Dict[str, MetricsVector]) -> str:
    lines: Iterable[str] = (
        f"{name}: precision = {m.precision:.2f}, recall = {m.recall:.2f}, "
        f"F1 = {m.f1:.2f}, accuracy = {m.accuracy:.2f}"
        for name, m in results.items()
    )
    return "\n".join(lines)
