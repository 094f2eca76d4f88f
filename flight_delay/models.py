# ---------------------------------------------
# Tree ensemble trainers used by the pipeline
# ---------------------------------------------

from __future__ import annotations

import copy
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np
from joblib import Parallel, delayed
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from xgboost import XGBClassifier

from flight_delay.config import DEFAULT_PARAMS

logger = logging.getLogger(__name__)


class Trainer(ABC):
    """Fits a model on a feature matrix and predicts with it.

    ``predict`` returns either class predictions or scores in [0, 1]; use
    :func:`to_labels` to turn either into booleans.
    """

    name = "trainer"

    @abstractmethod
    def fit(self, X, y) -> Any:
        raise NotImplementedError

    @abstractmethod
    def predict(self, model, X) -> np.ndarray:
        raise NotImplementedError


class SklearnTrainer(Trainer):
    def __init__(self, name: str, estimator_class, params: Optional[Dict[str, Any]] = None):
        self.name = name
        self.estimator_class = estimator_class
        self.params = dict(params or {})

    def fit(self, X, y):
        model = self.estimator_class(**self.params)
        start = time.time()
        model.fit(X, y)
        logger.info("Fitted %s on %d rows in %.1fs", self.name, len(X), time.time() - start)
        return model

    def predict(self, model, X):
        return model.predict(X)


class ParallelForestTrainer(SklearnTrainer):
    """Random forest grown as ``workers`` sub-forests in separate processes."""

    def __init__(self, params=None, workers: int = 2):
        super().__init__("random_forest", RandomForestClassifier, params)
        self.workers = workers

    def fit(self, X, y):
        start = time.time()
        model = fit_forest_parallel(X, y, self.workers, self.params)
        logger.info("Fitted %s (%d workers) on %d rows in %.1fs",
                    self.name, self.workers, len(X), time.time() - start)
        return model


class XGBoostTrainer(Trainer):
    name = "xgboost"

    def __init__(self, params=None):
        self.params = dict(params or {})

    def fit(self, X, y):
        model = XGBClassifier(**self.params)
        model.fit(np.asarray(X, dtype=float), np.asarray(y).astype(int))
        return model

    def predict(self, model, X):
        # Probability of the delayed class
        return model.predict_proba(np.asarray(X, dtype=float))[:, 1]


def to_labels(predictions, threshold: float = 0.5) -> np.ndarray:
    values = np.asarray(predictions)
    if values.dtype == bool:
        return values
    return values.astype(float) > threshold


def _fit_sub_forest(X, y, params, seed):
    params = dict(params, random_state=seed, n_jobs=1)
    return RandomForestClassifier(**params).fit(X, y)


def fit_forest_parallel(X, y, workers: int, params: Optional[Dict[str, Any]] = None) -> RandomForestClassifier:
    """Grow one forest per worker and concatenate their trees.

    Each worker gets ``n_estimators // workers`` trees (the first ones take
    the remainder) and a seed derived from ``random_state``, so the combined
    forest only depends on the inputs.
    """
    params = dict(params or {})
    total = params.pop("n_estimators", 100)
    base_seed = params.pop("random_state", None) or 0
    workers = max(1, min(workers, total))
    sizes = [total // workers + (1 if i < total % workers else 0) for i in range(workers)]

    forests = Parallel(n_jobs=workers)(
        delayed(_fit_sub_forest)(X, y, dict(params, n_estimators=size), base_seed + i)
        for i, size in enumerate(sizes)
    )

    combined = copy.deepcopy(forests[0])
    for forest in forests[1:]:
        combined.estimators_ += forest.estimators_
    combined.n_estimators = len(combined.estimators_)
    return combined


def make_trainer(name: str, params: Optional[Dict[str, Any]] = None, workers: int = 1) -> Trainer:
    if params is None:
        params = DEFAULT_PARAMS.get(name, {})
    if name == "random_forest":
        if workers > 1:
            return ParallelForestTrainer(params, workers)
        return SklearnTrainer(name, RandomForestClassifier, params)
    if name == "gradient_boosting":
        return SklearnTrainer(name, GradientBoostingClassifier, params)
    if name == "xgboost":
        return XGBoostTrainer(params)
    raise ValueError(f"unknown model {name!r}")
