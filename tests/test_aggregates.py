from __future__ import annotations

import pandas as pd
import pytest

from demand_dashboard.features.aggregates import (
    DataLoadResult,
    DemandSeries,
    Resolution,
    SeriesPoint,
    aggregate_samples,
    aggregate_series,
)


def _samples(rows: list[tuple[str, float]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "timestamp": pd.to_datetime([timestamp for timestamp, _ in rows]),
            "value": [value for _, value in rows],
        }
    )


def test_monthly_series_is_mean_per_calendar_month() -> None:
    samples = _samples(
        [
            ("2020-02-10 08:00", 50.0),
            ("2020-01-01 00:30", 100.0),
            ("2021-01-20 23:30", 10.0),
            ("2020-01-31 23:30", 200.0),
        ]
    )

    series = aggregate_series(samples, Resolution.monthly)

    assert series.points == (
        SeriesPoint(bucket=pd.Timestamp("2020-01-01"), value=150.0),
        SeriesPoint(bucket=pd.Timestamp("2020-02-01"), value=50.0),
        SeriesPoint(bucket=pd.Timestamp("2021-01-01"), value=10.0),
    )


def test_yearly_series_is_mean_per_calendar_year() -> None:
    samples = _samples(
        [
            ("2021-06-01 00:00", 10.0),
            ("2020-01-01 00:00", 100.0),
            ("2020-12-31 23:30", 200.0),
            ("2020-07-01 00:00", 60.0),
        ]
    )

    series = aggregate_series(samples, Resolution.yearly)

    assert [point.bucket for point in series] == [
        pd.Timestamp("2020-01-01"),
        pd.Timestamp("2021-01-01"),
    ]
    assert series.points[0].value == pytest.approx(120.0)
    assert series.points[1].value == 10.0


def test_aggregation_skips_empty_buckets_and_stays_strictly_increasing(
    load_result: DataLoadResult,
) -> None:
    samples = _samples([("2020-01-05", 1.0), ("2020-04-05", 2.0), ("2023-01-05", 3.0)])

    monthly = aggregate_series(samples, Resolution.monthly)

    assert len(monthly) == 3
    for series in (load_result.monthly, load_result.yearly):
        buckets = [point.bucket for point in series]
        assert all(earlier < later for earlier, later in zip(buckets, buckets[1:]))


def test_aggregate_samples_builds_both_resolutions_once(load_result: DataLoadResult) -> None:
    assert len(load_result.monthly) == 17 * 12
    assert len(load_result.yearly) == 17
    assert load_result.series_for("yearly") is load_result.yearly
    assert load_result.series_for(Resolution.monthly) is load_result.monthly
    assert load_result.n_dropped == 0


def test_aggregate_samples_reports_dropped_rows_in_summary() -> None:
    samples = _samples([("2020-01-05", 1.0), ("2020-01-06", 3.0)])

    result = aggregate_samples(samples, n_rows=5)
    summary = result.summary()

    assert summary["n_dropped"] == 3
    assert summary["monthly_buckets"] == 1
    assert summary["yearly_first_bucket"] == pd.Timestamp("2020-01-01")


def test_empty_samples_produce_empty_series() -> None:
    result = aggregate_samples(_samples([]))

    assert result.monthly.empty
    assert result.yearly.empty
    assert result.summary()["monthly_buckets"] == 0


def test_series_rejects_unordered_or_duplicate_buckets() -> None:
    point = SeriesPoint(bucket=pd.Timestamp("2020-01-01"), value=1.0)

    with pytest.raises(ValueError, match="strictly increasing"):
        DemandSeries(resolution=Resolution.monthly, points=(point, point))


def test_unknown_resolution_is_rejected(load_result: DataLoadResult) -> None:
    with pytest.raises(ValueError):
        load_result.series_for("weekly")
