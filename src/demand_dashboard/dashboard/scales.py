from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pandas as pd

from demand_dashboard.config import PaneConfig, ScalesConfig
from demand_dashboard.features.aggregates import DemandSeries, bucket_offset

YBaseline = Literal["padded", "zero"]


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __post_init__(self) -> None:
        if self.domain[0] == self.domain[1]:
            raise ValueError(f"Degenerate linear domain: {self.domain}")

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)


@dataclass(frozen=True)
class TimeScale:
    domain: tuple[pd.Timestamp, pd.Timestamp]
    range: tuple[float, float]

    def __post_init__(self) -> None:
        if self.domain[0] == self.domain[1]:
            raise ValueError(f"Degenerate time domain: {self.domain}")

    def _linear(self) -> LinearScale:
        start, end = self.domain
        return LinearScale(domain=(float(start.value), float(end.value)), range=self.range)

    def __call__(self, value: pd.Timestamp) -> float:
        return self._linear()(float(pd.Timestamp(value).value))

    def invert(self, pixel: float) -> pd.Timestamp:
        return pd.Timestamp(int(round(self._linear().invert(pixel))))


@dataclass(frozen=True)
class ViewState:
    series: DemandSeries
    x: TimeScale
    y: LinearScale

    @property
    def x_domain(self) -> tuple[pd.Timestamp, pd.Timestamp]:
        return self.x.domain

    @property
    def y_domain(self) -> tuple[float, float]:
        return self.y.domain


class ScaleManager:
    """Maps bucket/value pairs into a pane's plot area.

    Domains are derived from the active series on every call to ``recompute``;
    nothing is carried over from a previous series.
    """

    def __init__(
        self,
        width: float,
        height: float,
        *,
        y_baseline: YBaseline = "padded",
        padding_fraction: float = 0.25,
        min_y_span: float = 1.0,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Plot area must have positive width and height")
        self.width = float(width)
        self.height = float(height)
        self.y_baseline = y_baseline
        self.padding_fraction = float(padding_fraction)
        self.min_y_span = float(min_y_span)

    @classmethod
    def from_config(cls, pane: PaneConfig, scales: ScalesConfig) -> ScaleManager:
        margins = pane.margins
        return cls(
            width=pane.width - margins.left - margins.right,
            height=pane.height - margins.top - margins.bottom,
            y_baseline=pane.y_baseline,
            padding_fraction=scales.y_padding_fraction,
            min_y_span=scales.min_y_span,
        )

    def x_domain(self, series: DemandSeries) -> tuple[pd.Timestamp, pd.Timestamp]:
        first, last = series.bucket_extent()
        if first == last:
            offset = bucket_offset(series.resolution)
            return first - offset, last + offset
        return first, last

    def y_domain(self, series: DemandSeries) -> tuple[float, float]:
        low, high = series.value_extent()
        if self.y_baseline == "zero":
            low, high = min(0.0, low), max(0.0, high)
            if low == high:
                return low, low + self.min_y_span
            return low, high

        span = high - low
        if span == 0:
            pad = max(abs(high) * self.padding_fraction, self.min_y_span / 2)
        else:
            pad = self.padding_fraction * span
        return low - pad, high + pad

    def recompute(self, series: DemandSeries) -> ViewState:
        if series.empty:
            raise ValueError("Cannot derive scales from an empty series")
        return ViewState(
            series=series,
            x=TimeScale(domain=self.x_domain(series), range=(0.0, self.width)),
            y=LinearScale(domain=self.y_domain(series), range=(self.height, 0.0)),
        )
