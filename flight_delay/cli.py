from __future__ import annotations

import argparse
import logging
import sys

from flight_delay.config import PipelineConfig
from flight_delay.exceptions import FlightDelayError
from flight_delay.jobs import LocalFeatureJob, PigFeatureJob
from flight_delay.pipeline import run_pipeline

logger = logging.getLogger("flight_delay")


def parse_args(argv=None) -> argparse.Namespace:
    defaults = PipelineConfig()
    p = argparse.ArgumentParser(prog="flight-delay", description="Flight departure delay classification")
    p.add_argument("--raw-path", default=defaults.raw_path, help="raw flights dataset, {year} is substituted")
    p.add_argument("--weather-path", default=defaults.weather_path)
    p.add_argument("--features-path", default=defaults.features_path)
    p.add_argument("--origin", default=defaults.origin)
    p.add_argument("--station", default=defaults.station, help="weather station of the origin airport")
    p.add_argument("--train-year", type=int, default=defaults.train_year)
    p.add_argument("--test-year", type=int, default=defaults.test_year)
    p.add_argument("--top-k", type=int, default=defaults.top_k)
    p.add_argument("--models", nargs="+", default=defaults.models,
                   choices=["random_forest", "gradient_boosting", "xgboost"])
    p.add_argument("--workers", type=int, default=defaults.workers,
                   help="processes used to grow the random forest")
    p.add_argument("--engine", choices=["local", "pig"], default="local")
    p.add_argument("--pig-script", default="feature_matrix.pig")
    p.add_argument("--skip-explore", action="store_true")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = PipelineConfig(
        raw_path=args.raw_path,
        weather_path=args.weather_path,
        features_path=args.features_path,
        origin=args.origin,
        station=args.station,
        train_year=args.train_year,
        test_year=args.test_year,
        top_k=args.top_k,
        models=args.models,
        workers=args.workers,
    )
    if args.engine == "pig":
        job = PigFeatureJob(args.pig_script, config)
    else:
        job = LocalFeatureJob(config)

    try:
        run_pipeline(config, job=job, explore_raw=not args.skip_explore)
    except FlightDelayError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
