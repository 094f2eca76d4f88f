"""End to end run: explore, build features, train on one year, test on the next."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Optional

from flight_delay import eda
from flight_delay.config import FEATURE_COLUMNS, PipelineConfig
from flight_delay.exceptions import PipelineStageError
from flight_delay.features import align, encode, split_xy
from flight_delay.filesystem import FileSystem, LocalFileSystem
from flight_delay.ingest import read_table
from flight_delay.jobs import FeatureJob, LocalFeatureJob
from flight_delay.metrics import MetricsVector, compute_metrics, format_report
from flight_delay.models import Trainer, make_trainer, to_labels

logger = logging.getLogger(__name__)


@contextmanager
def stage(name: str):
    logger.info("Stage %s", name)
    try:
        yield
    except PipelineStageError:
        raise
    except Exception as exc:
        raise PipelineStageError(name, exc) from exc


def explore(config: PipelineConfig, fs: FileSystem) -> dict:
    table = read_table(config.raw_for(config.train_year), fs=fs)
    summary = {
        "by_month": eda.mean_delay_by_month(table, config.origin),
        "by_hour": eda.mean_delay_by_hour(table, config.origin),
        "delay_rate": eda.delay_rate(table, config.origin, config.threshold),
    }
    logger.info("%s %d: %.1f%% of departures delayed %d minutes or more",
                config.origin, config.train_year, summary["delay_rate"] * 100, config.threshold)
    return summary


def run_pipeline(config: PipelineConfig, fs: Optional[FileSystem] = None,
                 job: Optional[FeatureJob] = None,
                 trainers: Optional[Dict[str, Trainer]] = None,
                 explore_raw: bool = True) -> Dict[str, MetricsVector]:
    fs = fs or LocalFileSystem()
    job = job or LocalFeatureJob(config, fs)
    if trainers is None:
        trainers = {name: make_trainer(name, config.params.get(name), config.workers)
                    for name in config.models}

    if explore_raw:
        with stage("explore"):
            explore(config, fs)

    paths = {}
    for year in (config.train_year, config.test_year):
        with stage(f"feature-job:{year}"):
            paths[year] = job.run(year, config.origin)

    with stage("ingest-features"):
        train_raw = read_table(paths[config.train_year], names=FEATURE_COLUMNS, fs=fs)
        test_raw = read_table(paths[config.test_year], names=FEATURE_COLUMNS, fs=fs)

    with stage("encode"):
        train = encode(train_raw, config.top_k, threshold=config.threshold)
        test = encode(test_raw, config.top_k, threshold=config.threshold)

    with stage("align"):
        train, test = align(train, test)
        train_x, train_y = split_xy(train)
        test_x, test_y = split_xy(test)

    results = {}
    for name, trainer in trainers.items():
        with stage(f"fit:{name}"):
            model = trainer.fit(train_x, train_y)
        with stage(f"predict:{name}"):
            predicted = to_labels(trainer.predict(model, test_x))
        with stage(f"evaluate:{name}"):
            results[name] = compute_metrics(predicted, test_y.to_numpy())

    print(format_report(results))
    return results
