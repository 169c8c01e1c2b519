"""Domain value objects for metrics backend query results.

These mirror the result types of the Prometheus HTTP API: an instant query
yields a vector of labeled samples, a range query yields a matrix of labeled
series. Scalar and string results are represented so that callers can detect
an unexpected result shape.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class MetricSample:
    """A single labeled sample of an instant vector.

    Attributes:
        labels: Label set of the series
        timestamp: Evaluation timestamp
        value: Sample value (may be NaN)
    """

    labels: dict[str, str]
    timestamp: datetime
    value: float


@dataclass(frozen=True)
class SamplePair:
    """A (timestamp, value) point of a range series."""

    timestamp: datetime
    value: float


@dataclass(frozen=True)
class MetricSeries:
    """A labeled series of a range matrix.

    Attributes:
        labels: Label set of the series
        values: Points of the series as returned by the backend
    """

    labels: dict[str, str]
    values: list[SamplePair] = field(default_factory=list)


@dataclass(frozen=True)
class InstantVector:
    """Result of an instant query with result type ``vector``."""

    samples: list[MetricSample] = field(default_factory=list)

    result_type = "vector"


@dataclass(frozen=True)
class RangeMatrix:
    """Result of a range query with result type ``matrix``."""

    series: list[MetricSeries] = field(default_factory=list)

    result_type = "matrix"


@dataclass(frozen=True)
class ScalarResult:
    """Result of a query with result type ``scalar``."""

    timestamp: datetime
    value: float

    result_type = "scalar"


@dataclass(frozen=True)
class StringResult:
    """Result of a query with result type ``string``."""

    timestamp: datetime
    value: str

    result_type = "string"


QueryResult = InstantVector | RangeMatrix | ScalarResult | StringResult
