from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from demand_dashboard.config import AppConfig
from demand_dashboard.io.read import DataFetchError, load_raw_records


def _config(source: Path | str | None, **columns: str) -> AppConfig:
    return AppConfig.model_validate(
        {"input": {"source": None if source is None else str(source)}, "columns": columns}
    )


def test_load_raw_records_normalizes_columns_and_keeps_strings(tmp_path: Path) -> None:
    csv_path = tmp_path / "demand.csv"
    csv_path.write_text(
        "SETTLEMENT_DATE,ND,TSD\n01/01/2020 00:00,27000,30000\n01/01/2020 00:30,,30100\n",
        encoding="utf-8",
    )

    loaded = load_raw_records(_config(csv_path, timestamp="SETTLEMENT_DATE", value="ND"))

    assert list(loaded.columns[:2]) == ["timestamp", "nd"]
    assert loaded.loc[0, "nd"] == "27000"
    assert loaded.loc[1, "nd"] == ""


def test_load_raw_records_missing_file_is_fetch_error(tmp_path: Path) -> None:
    with pytest.raises(DataFetchError, match="not found"):
        load_raw_records(_config(tmp_path / "missing.csv"))


def test_load_raw_records_requires_configured_source() -> None:
    with pytest.raises(DataFetchError, match="input.source"):
        load_raw_records(_config(None))


def test_load_raw_records_missing_column_is_fetch_error(tmp_path: Path) -> None:
    csv_path = tmp_path / "demand.csv"
    pd.DataFrame({"timestamp": ["01/01/2020 00:00"], "tsd": ["1"]}).to_csv(csv_path, index=False)

    with pytest.raises(DataFetchError, match="nd"):
        load_raw_records(_config(csv_path))


def test_load_raw_records_wraps_reader_failures(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def _unreachable(*_args: object, **_kwargs: object) -> pd.DataFrame:
        raise OSError("connection refused")

    monkeypatch.setattr("demand_dashboard.io.read.pd.read_csv", _unreachable)

    with pytest.raises(DataFetchError, match="connection refused"):
        load_raw_records(_config("https://example.org/merged.csv"))
