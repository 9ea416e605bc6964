from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from demand_dashboard.config import ColumnsConfig


@dataclass(frozen=True)
class CanonicalColumns:
    timestamp: str = "timestamp"
    value: str = "nd"


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Rename source columns to the canonical names used by the ingestor."""
    rename_map = {
        columns.timestamp: CanonicalColumns.timestamp,
        columns.value: CanonicalColumns.value,
    }
    missing = [source for source in rename_map if source not in df.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ValueError(f"Missing required columns in source table: {missing_str}")
    return df.rename(columns=rename_map)
