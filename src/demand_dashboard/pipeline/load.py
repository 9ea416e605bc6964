from __future__ import annotations

import logging
from pathlib import Path

from demand_dashboard.config import AppConfig
from demand_dashboard.dashboard.scales import ScaleManager
from demand_dashboard.features.aggregates import DataLoadResult, aggregate_samples
from demand_dashboard.io.read import DataFetchError, load_raw_records
from demand_dashboard.io.write import write_summary, write_table
from demand_dashboard.paths import build_output_paths
from demand_dashboard.preprocess.samples import ingest_samples
from demand_dashboard.viz.time_series import plot_demand_series

LOGGER = logging.getLogger(__name__)


def load_dashboard_data(config: AppConfig) -> DataLoadResult:
    """Fetch, ingest and aggregate the demand source exactly once."""
    raw = load_raw_records(config)
    samples = ingest_samples(raw, timestamp_format=config.input.timestamp_format)
    if samples.empty:
        raise DataFetchError(
            f"No valid samples in demand source {config.input.source} ({len(raw)} rows read)"
        )
    return aggregate_samples(samples, n_rows=len(raw))


def _render_series_figures(data: DataLoadResult, out_dir: Path, config: AppConfig) -> list[Path]:
    paths = build_output_paths(out_dir)
    figure_suffix = config.outputs.figures_format
    scales = ScaleManager.from_config(config.layout.primary, config.scales)
    written: list[Path] = []

    try:
        for series in (data.monthly, data.yearly):
            if series.empty:
                continue
            written.append(
                plot_demand_series(
                    series,
                    scales.recompute(series),
                    paths.figures / f"{series.resolution.value}_demand.{figure_suffix}",
                    color=config.layout.line_color,
                )
            )
    except Exception:  # pragma: no cover
        LOGGER.exception("Failed rendering one or more series figures")
    return written


def write_load_artifacts(
    data: DataLoadResult,
    out_dir: Path,
    config: AppConfig,
) -> dict[str, Path]:
    paths = build_output_paths(out_dir)
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"

    outputs: dict[str, Path] = {}
    for series in (data.monthly, data.yearly):
        name = f"{series.resolution.value}_series"
        outputs[name] = write_table(
            series.to_frame(),
            paths.tables / f"{name}.{extension}",
            fmt=config.outputs.tables_format,
        )
    outputs["load_summary"] = write_summary(data.summary(), paths.summary / "load_summary.json")

    for figure_path in _render_series_figures(data=data, out_dir=out_dir, config=config):
        outputs[figure_path.stem] = figure_path
    return outputs
