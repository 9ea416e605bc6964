from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

import pandas as pd

LOGGER = logging.getLogger(__name__)


class Resolution(str, Enum):
    monthly = "monthly"
    yearly = "yearly"


DEFAULT_RESOLUTION = Resolution.monthly

PERIOD_ALIASES = {
    Resolution.monthly: "M",
    Resolution.yearly: "Y",
}


def bucket_offset(resolution: Resolution) -> pd.DateOffset:
    """Width of one bucket at ``resolution``."""
    if resolution == Resolution.yearly:
        return pd.DateOffset(years=1)
    return pd.DateOffset(months=1)


@dataclass(frozen=True)
class SeriesPoint:
    bucket: pd.Timestamp
    value: float


@dataclass(frozen=True)
class DemandSeries:
    resolution: Resolution
    points: tuple[SeriesPoint, ...] = ()

    def __post_init__(self) -> None:
        for previous, current in zip(self.points, self.points[1:]):
            if not previous.bucket < current.bucket:
                raise ValueError(
                    "Series buckets must be strictly increasing: "
                    f"{previous.bucket} then {current.bucket}"
                )

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[SeriesPoint]:
        return iter(self.points)

    @property
    def empty(self) -> bool:
        return not self.points

    def value_extent(self) -> tuple[float, float]:
        values = [point.value for point in self.points]
        return min(values), max(values)

    def bucket_extent(self) -> tuple[pd.Timestamp, pd.Timestamp]:
        return self.points[0].bucket, self.points[-1].bucket

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "bucket": [point.bucket for point in self.points],
                "value": [point.value for point in self.points],
            },
            columns=["bucket", "value"],
        )


def aggregate_series(samples: pd.DataFrame, resolution: Resolution) -> DemandSeries:
    """Mean of sample values per calendar bucket, ascending, no empty buckets."""
    if samples.empty:
        return DemandSeries(resolution=resolution)

    alias = PERIOD_ALIASES[resolution]
    buckets = samples["timestamp"].dt.to_period(alias).dt.to_timestamp()
    grouped = samples["value"].groupby(buckets.rename("bucket")).mean().sort_index()
    points = tuple(
        SeriesPoint(bucket=pd.Timestamp(bucket), value=float(value))
        for bucket, value in grouped.items()
    )
    return DemandSeries(resolution=resolution, points=points)


@dataclass(frozen=True)
class DataLoadResult:
    """Both resolutions computed once per full load; read-only afterwards."""

    monthly: DemandSeries
    yearly: DemandSeries
    n_rows: int
    n_samples: int

    @property
    def n_dropped(self) -> int:
        return self.n_rows - self.n_samples

    def series_for(self, resolution: Resolution | str) -> DemandSeries:
        resolved = Resolution(resolution)
        if resolved == Resolution.yearly:
            return self.yearly
        return self.monthly

    def summary(self) -> dict[str, object]:
        summary: dict[str, object] = {
            "n_rows": self.n_rows,
            "n_samples": self.n_samples,
            "n_dropped": self.n_dropped,
        }
        for series in (self.monthly, self.yearly):
            key = series.resolution.value
            summary[f"{key}_buckets"] = len(series)
            if not series.empty:
                first, last = series.bucket_extent()
                summary[f"{key}_first_bucket"] = first
                summary[f"{key}_last_bucket"] = last
        return summary


def aggregate_samples(samples: pd.DataFrame, n_rows: int | None = None) -> DataLoadResult:
    monthly = aggregate_series(samples, Resolution.monthly)
    yearly = aggregate_series(samples, Resolution.yearly)
    LOGGER.info(
        "Aggregated %d samples into %d monthly and %d yearly buckets",
        len(samples),
        len(monthly),
        len(yearly),
    )
    return DataLoadResult(
        monthly=monthly,
        yearly=yearly,
        n_rows=len(samples) if n_rows is None else int(n_rows),
        n_samples=len(samples),
    )
