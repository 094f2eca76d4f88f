import numpy as np
import pandas as pd
import pytest
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier

from flight_delay.models import (ParallelForestTrainer, SklearnTrainer, Trainer, XGBoostTrainer,
                                 fit_forest_parallel, make_trainer, to_labels)


@pytest.fixture
def matrix():
    rng = np.random.RandomState(0)
    X = pd.DataFrame({
        "hour": rng.randint(0, 24, 200),
        "distance": rng.uniform(100, 2000, 200),
        "dest_LAX": rng.rand(200) > 0.5,
    })
    y = pd.Series(X["hour"] > 15)
    return X, y


def test_to_labels_passes_booleans_through():
    assert to_labels(np.array([True, False])).tolist() == [True, False]


def test_to_labels_thresholds_scores():
    assert to_labels([0.2, 0.5, 0.51, 1.0]).tolist() == [False, False, True, True]
    assert to_labels(np.array([0, 1])).tolist() == [False, True]


@pytest.mark.parametrize("name, cls", [
    ("random_forest", RandomForestClassifier),
    ("gradient_boosting", GradientBoostingClassifier),
])
def test_sklearn_trainers(matrix, name, cls):
    X, y = matrix
    trainer = make_trainer(name, {"n_estimators": 20, "random_state": 0})
    assert isinstance(trainer, SklearnTrainer)
    model = trainer.fit(X, y)
    assert isinstance(model, cls)
    predicted = to_labels(trainer.predict(model, X))
    assert predicted.dtype == bool
    assert (predicted == y.to_numpy()).mean() > 0.9


def test_hyperparameters_pass_through(matrix):
    X, y = matrix
    trainer = make_trainer("gradient_boosting", {"n_estimators": 7, "max_depth": 2, "learning_rate": 0.3,
                                                 "min_samples_leaf": 5})
    model = trainer.fit(X, y)
    assert (model.n_estimators, model.max_depth, model.learning_rate, model.min_samples_leaf) == (7, 2, 0.3, 5)


def test_xgboost_returns_scores(matrix):
    X, y = matrix
    trainer = make_trainer("xgboost", {"n_estimators": 20, "max_depth": 3})
    assert isinstance(trainer, XGBoostTrainer)
    scores = trainer.predict(trainer.fit(X, y), X)
    assert ((scores >= 0) & (scores <= 1)).all()
    assert (to_labels(scores) == y.to_numpy()).mean() > 0.9


def test_parallel_forest_concatenates_trees(matrix):
    X, y = matrix
    forest = fit_forest_parallel(X, y, workers=3, params={"n_estimators": 10, "random_state": 1})
    assert forest.n_estimators == len(forest.estimators_) == 10
    assert forest.predict(X).dtype == bool


def test_parallel_forest_is_deterministic(matrix):
    X, y = matrix
    params = {"n_estimators": 6, "random_state": 3}
    a = fit_forest_parallel(X, y, 2, params)
    b = fit_forest_parallel(X, y, 2, params)
    np.testing.assert_array_equal(a.predict_proba(X), b.predict_proba(X))


def test_make_trainer_with_workers():
    assert isinstance(make_trainer("random_forest", workers=4), ParallelForestTrainer)


def test_unknown_model():
    with pytest.raises(ValueError):
        make_trainer("svm")


def test_trainer_needs_fit_and_predict():
    class FitOnly(Trainer):
        def fit(self, X, y):
            return None

    with pytest.raises(TypeError):
        FitOnly()
