class FlightDelayError(Exception):
    """Base class for every failure raised by the pipeline."""


class IngestionError(FlightDelayError):
    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")


class CoercionError(FlightDelayError):
    """A value in a numeric column could not be parsed."""

    def __init__(self, column: str, values):
        self.column = column
        self.values = list(values)
        sample = ", ".join(repr(v) for v in self.values[:5])
        super().__init__(f"column {column!r} has non-numeric values: {sample}")


class FeatureJobError(FlightDelayError):
    def __init__(self, year, origin: str, message: str):
        self.year = year
        self.origin = origin
        super().__init__(f"feature job for {origin} {year} failed: {message}")


class PipelineStageError(FlightDelayError):
    """Wraps any failure with the name of the stage it happened in."""

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"stage {stage!r} failed: {cause}")
