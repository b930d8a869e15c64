"""Tests for DistributionsConfig persistence."""

from __future__ import annotations

import json
from pathlib import Path

from nicedistributions.distributions_widget.classifier import MappingSchema
from nicedistributions.distributions_widget.distributions_config import (
    SCHEMA_VERSION,
    DistributionsConfig,
    DistributionsConfigData,
)
from nicedistributions.distributions_widget.distributions_widget import DistributionsWidget
from nicedistributions.distributions_widget.explorer_state import ExplorerState
from nicedistributions.distributions_widget.fetcher import DistributionFetcher
from nicedistributions.distributions_widget.presenter import DistributionPresenter
from nicedistributions.distributions_widget.theme import ThemeMode


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    cfg = DistributionsConfig.load(config_path=tmp_path / "missing.json")
    assert cfg.data == DistributionsConfigData()
    assert not (tmp_path / "missing.json").exists()


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "sub" / "distributions_config.json"
    cfg = DistributionsConfig(path=path)
    cfg.data.base_url = "http://example:8000"
    cfg.data.time_zone = "Europe/Berlin"
    cfg.data.theme = "dark"
    cfg.save()

    loaded = DistributionsConfig.load(config_path=path)
    assert loaded.data.base_url == "http://example:8000"
    assert loaded.data.time_zone == "Europe/Berlin"
    assert loaded.data.theme == "dark"


def test_unknown_keys_and_bad_values_are_tolerated(tmp_path: Path) -> None:
    path = tmp_path / "c.json"
    path.write_text(
        json.dumps(
            {
                "schema_version": SCHEMA_VERSION,
                "theme": "purple",
                "cache_max_entries": "lots",
                "request_timeout_sec": 5,
                "mystery": 1,
            }
        ),
        encoding="utf-8",
    )
    data = DistributionsConfig.load(config_path=path).data
    assert data.theme == "light"
    assert data.cache_max_entries == DistributionsConfigData().cache_max_entries
    assert data.request_timeout_sec == 5.0


def test_schema_mismatch_resets(tmp_path: Path) -> None:
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"schema_version": 999, "theme": "dark"}), encoding="utf-8")

    assert DistributionsConfig.load(config_path=path).data.theme == "light"
    kept = DistributionsConfig.load(config_path=path, reset_on_version_mismatch=False)
    assert kept.data.theme == "dark"
    assert kept.data.schema_version == SCHEMA_VERSION


def test_invalid_json_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "c.json"
    path.write_text("{not json", encoding="utf-8")
    assert DistributionsConfig.load(config_path=path).data == DistributionsConfigData()

    path.write_text("[1, 2]", encoding="utf-8")
    assert DistributionsConfig.load(config_path=path).data == DistributionsConfigData()


def test_make_fetcher(tmp_path: Path) -> None:
    cfg = DistributionsConfig(path=tmp_path / "c.json")
    cfg.data.cache_max_entries = 3
    fetcher = cfg.make_fetcher()
    assert isinstance(fetcher, DistributionFetcher)
    assert fetcher._cache_max_entries == 3
    assert fetcher._base_url == cfg.data.base_url


def test_make_presenter_uses_configured_time_zone(tmp_path: Path) -> None:
    cfg = DistributionsConfig(path=tmp_path / "c.json")
    cfg.data.time_zone = "Europe/Berlin"
    fetcher = DistributionFetcher(base_url="http://test")

    presenter = cfg.make_presenter(MappingSchema({"created_at": "DateTimeField"}), fetcher=fetcher)

    assert isinstance(presenter, DistributionPresenter)
    assert presenter.time_zone == "Europe/Berlin"
    assert presenter._fetcher is fetcher


def test_make_presenter_builds_its_own_fetcher(tmp_path: Path) -> None:
    cfg = DistributionsConfig(path=tmp_path / "c.json")
    cfg.data.base_url = "http://example:8000"

    presenter = cfg.make_presenter(MappingSchema({}))

    assert presenter._fetcher._base_url == "http://example:8000"


def test_make_widget_uses_configured_theme(tmp_path: Path) -> None:
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"schema_version": SCHEMA_VERSION, "theme": "dark"}), encoding="utf-8")
    cfg = DistributionsConfig.load(config_path=path)
    presenter = cfg.make_presenter(MappingSchema({}))

    widget = cfg.make_widget(group="Labels", presenter=presenter, context_provider=ExplorerState().snapshot)

    assert isinstance(widget, DistributionsWidget)
    assert widget._theme is ThemeMode.DARK
