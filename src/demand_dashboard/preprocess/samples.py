from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from demand_dashboard.config import DEFAULT_TIMESTAMP_FORMAT
from demand_dashboard.io.schema import CanonicalColumns

LOGGER = logging.getLogger(__name__)

SAMPLE_COLUMNS = ["timestamp", "value"]


def ingest_samples(
    df: pd.DataFrame,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> pd.DataFrame:
    """Parse raw rows into a ``timestamp``/``value`` sample frame.

    A row survives only if its timestamp matches ``timestamp_format`` exactly and
    its value parses to a finite number. Surviving rows keep their input order.
    """
    raw_timestamps = df[CanonicalColumns.timestamp].astype(str)
    raw_values = df[CanonicalColumns.value].astype(str).str.strip()

    timestamps = pd.to_datetime(raw_timestamps, format=timestamp_format, errors="coerce")
    # surrounding whitespace is not part of the format
    padded = raw_timestamps != raw_timestamps.str.strip()
    values = pd.to_numeric(raw_values, errors="coerce").astype(float)

    is_finite = pd.Series(np.isfinite(values.to_numpy()), index=df.index)
    keep = timestamps.notna() & ~padded & is_finite

    samples = pd.DataFrame(
        {
            "timestamp": timestamps[keep],
            "value": values[keep],
        },
        columns=SAMPLE_COLUMNS,
    ).reset_index(drop=True)

    dropped = int(len(df) - len(samples))
    LOGGER.info("Ingested %d samples (%d rows dropped)", len(samples), dropped)
    return samples
