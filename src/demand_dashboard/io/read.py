from __future__ import annotations

from pathlib import Path

import pandas as pd

from demand_dashboard.config import AppConfig, is_remote_source
from demand_dashboard.io.schema import CanonicalColumns, normalize_columns

REQUIRED_COLUMNS = [CanonicalColumns.timestamp, CanonicalColumns.value]


class DataFetchError(RuntimeError):
    """The demand source could not be read; the session cannot render."""


def _validate_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"Normalized data missing column: {column}")
    return df


def load_raw_records(config: AppConfig) -> pd.DataFrame:
    """Fetch the source table once and return canonical string columns.

    Values are kept as raw strings; row-level parsing happens in the ingestor.
    """
    source = config.input.source
    if not source:
        raise DataFetchError("input.source is not configured")
    if not is_remote_source(source) and not Path(source).is_file():
        raise DataFetchError(f"Demand source not found: {source}")

    try:
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        df = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        raise DataFetchError(f"Failed to read demand source {source}: {exc}") from exc

    try:
        normalized = normalize_columns(df=df, columns=config.columns)
        return _validate_required_columns(normalized)
    except ValueError as exc:
        raise DataFetchError(str(exc)) from exc

