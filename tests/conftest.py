from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from demand_dashboard.features.aggregates import DataLoadResult, aggregate_samples


def build_raw_frame(start: str = "2008-01-01", end: str = "2024-12-01") -> pd.DataFrame:
    """Two readings per calendar month, formatted the way the source exports them."""
    month_starts = pd.date_range(start=start, end=end, freq="MS")
    timestamps: list[str] = []
    values: list[str] = []
    for index, month_start in enumerate(month_starts):
        for day_offset, bump in ((0, 0.0), (14, 100.0)):
            moment = month_start + pd.Timedelta(days=day_offset, hours=12, minutes=30)
            timestamps.append(moment.strftime("%d/%m/%Y %H:%M"))
            values.append(str(20000.0 + index * 10.0 + bump))
    return pd.DataFrame({"timestamp": timestamps, "nd": values})


def build_samples(start: str = "2008-01-01", end: str = "2024-12-01") -> pd.DataFrame:
    raw = build_raw_frame(start=start, end=end)
    return pd.DataFrame(
        {
            "timestamp": pd.to_datetime(raw["timestamp"], format="%d/%m/%Y %H:%M"),
            "value": raw["nd"].astype(float),
        }
    )


@pytest.fixture
def load_result() -> DataLoadResult:
    samples = build_samples()
    return aggregate_samples(samples, n_rows=len(samples))


@pytest.fixture
def demand_csv(tmp_path: Path) -> Path:
    raw = build_raw_frame(start="2019-01-01", end="2020-12-01")
    extra = pd.DataFrame(
        {
            "timestamp": ["not a date", "05/03/2020 10:00", "2020-03-05 10:00"],
            "nd": ["1000", "", "1000"],
        }
    )
    frame = pd.concat([raw, extra], ignore_index=True)
    frame["tsd"] = "0"
    csv_path = tmp_path / "merged.csv"
    frame.to_csv(csv_path, index=False)
    return csv_path
