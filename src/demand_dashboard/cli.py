from __future__ import annotations

import logging
from pathlib import Path

import typer

from demand_dashboard.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from demand_dashboard.dashboard.app import create_app, run_server
from demand_dashboard.features.aggregates import DataLoadResult
from demand_dashboard.io.read import DataFetchError
from demand_dashboard.logging import configure_logging
from demand_dashboard.pipeline.load import load_dashboard_data, write_load_artifacts

LOGGER = logging.getLogger(__name__)

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _load_or_exit(cfg: AppConfig) -> DataLoadResult:
    try:
        return load_dashboard_data(cfg)
    except DataFetchError as exc:
        LOGGER.error("Demand data load failed: %s", exc)
        typer.echo(f"Data load failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def aggregate(
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    log_level: str = typer.Option("INFO", help="Logging level."),
) -> None:
    """Aggregate the demand source into monthly/yearly series tables and figures."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    data = _load_or_exit(cfg)
    outputs = write_load_artifacts(data=data, out_dir=out, config=cfg)
    typer.echo(
        f"Aggregation complete. Samples: {data.n_samples} (dropped {data.n_dropped}). "
        f"Outputs: {', '.join(sorted(outputs.keys()))}"
    )


@app.command()
def serve(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    host: str | None = typer.Option(None, help="Override server.host."),
    port: int | None = typer.Option(None, min=1, max=65535, help="Override server.port."),
    debug: bool | None = typer.Option(None, help="Override server.debug."),
    log_level: str = typer.Option("INFO", help="Logging level."),
) -> None:
    """Load the demand source once and serve the interactive dashboard."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    if host is not None:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port
    if debug is not None:
        cfg.server.debug = debug

    data = _load_or_exit(cfg)
    dash_app = create_app(data=data, config=cfg)
    typer.echo(f"Serving dashboard on http://{cfg.server.host}:{cfg.server.port}")
    run_server(dash_app, cfg.server)


if __name__ == "__main__":
    app()
