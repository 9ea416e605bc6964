from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from demand_dashboard.config import AppConfig, BreakdownConfig, load_config


def test_load_config_resolves_relative_source(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump({"input": {"source": "data/merged.csv"}}),
        encoding="utf-8",
    )

    cfg = load_config(config_path)

    assert Path(cfg.input.source or "").is_absolute()
    assert cfg.input.source == str((tmp_path / "data" / "merged.csv").resolve())


def test_load_config_keeps_remote_source(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump({"input": {"source": "https://example.org/merged.csv"}}),
        encoding="utf-8",
    )

    cfg = load_config(config_path)

    assert cfg.input.source == "https://example.org/merged.csv"


def test_load_config_uses_env_source_when_unset(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump({"input": {"source": None}}), encoding="utf-8")
    env_source = tmp_path / "env.csv"
    monkeypatch.setenv("DEMAND_DASHBOARD_SOURCE", str(env_source))

    cfg = load_config(config_path)

    assert cfg.input.source == str(env_source)


def test_load_config_defaults_match_dashboard_layout(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("", encoding="utf-8")

    cfg = load_config(config_path)

    assert cfg.input.timestamp_format == "%d/%m/%Y %H:%M"
    assert cfg.scales.y_padding_fraction == 0.25
    assert (cfg.layout.primary.width, cfg.layout.primary.height) == (800, 500)
    assert (cfg.layout.stream.width, cfg.layout.stream.height) == (500, 400)
    margins = cfg.layout.primary.margins
    assert (margins.top, margins.right, margins.bottom, margins.left) == (60, 70, 80, 90)
    assert [share.name for share in cfg.breakdown.shares] == ["Coal", "Gas", "Wind"]


def test_config_rejects_unknown_sections() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"detectors": {}})


def test_breakdown_shares_must_sum_to_one() -> None:
    with pytest.raises(ValidationError, match="sum to 1.0"):
        BreakdownConfig.model_validate(
            {"shares": [{"name": "Coal", "share": 0.3}, {"name": "Gas", "share": 0.3}]}
        )


def test_repository_default_config_loads() -> None:
    config_path = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"

    cfg = load_config(config_path)

    assert cfg.layout.stream.y_baseline == "zero"
    assert cfg.input.source is not None
    assert cfg.input.source.endswith("merged.csv")
