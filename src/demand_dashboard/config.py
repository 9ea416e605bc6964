from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"
SOURCE_ENV_VAR = "DEMAND_DASHBOARD_SOURCE"


class ColumnsConfig(BaseModel):
    timestamp: str = "timestamp"
    value: str = "nd"


class InputConfig(BaseModel):
    source: str | None = "Data/merged.csv"
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT


class ScalesConfig(BaseModel):
    y_padding_fraction: float = Field(default=0.25, ge=0.0, le=1.0)
    min_y_span: float = Field(default=1.0, gt=0.0)


class BreakdownShare(BaseModel):
    name: str
    share: float = Field(ge=0.0, le=1.0)


def _default_shares() -> list[BreakdownShare]:
    return [
        BreakdownShare(name="Coal", share=0.3),
        BreakdownShare(name="Gas", share=0.5),
        BreakdownShare(name="Wind", share=0.2),
    ]


class BreakdownConfig(BaseModel):
    root_name: str = "Energy"
    shares: list[BreakdownShare] = Field(default_factory=_default_shares, min_length=1)

    @model_validator(mode="after")
    def _shares_sum_to_one(self) -> BreakdownConfig:
        total = math.fsum(item.share for item in self.shares)
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"breakdown shares must sum to 1.0, got {total}")
        return self


class MarginsConfig(BaseModel):
    top: int = Field(default=60, ge=0)
    right: int = Field(default=70, ge=0)
    bottom: int = Field(default=80, ge=0)
    left: int = Field(default=90, ge=0)


class PaneConfig(BaseModel):
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    margins: MarginsConfig = Field(default_factory=MarginsConfig)
    y_baseline: Literal["padded", "zero"] = "padded"


class LayoutConfig(BaseModel):
    primary: PaneConfig = Field(default_factory=lambda: PaneConfig(width=800, height=500))
    stream: PaneConfig = Field(
        default_factory=lambda: PaneConfig(width=500, height=400, y_baseline="zero")
    )
    sunburst: PaneConfig = Field(default_factory=lambda: PaneConfig(width=500, height=400))
    marker_radius: float = Field(default=4.0, gt=0.0)
    line_color: str = "#1e90ff"
    highlight_color: str = "red"


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv"] = "parquet"
    figures_format: str = "png"


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8050, ge=1, le=65535)
    debug: bool = False


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    scales: ScalesConfig = Field(default_factory=ScalesConfig)
    breakdown: BreakdownConfig = Field(default_factory=BreakdownConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def is_remote_source(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def _resolve_source(source: str | None, base_dir: Path) -> str | None:
    if not source:
        return None
    if is_remote_source(source):
        return source
    candidate = Path(source)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.input.source = _resolve_source(
        config.input.source or os.getenv(SOURCE_ENV_VAR),
        base_dir,
    )
    return config
