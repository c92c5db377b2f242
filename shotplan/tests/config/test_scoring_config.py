from __future__ import annotations

import json

import pytest

from shotplan.config import coerce_boolish, env_bool, SCORING_CONFIG_ENV
from shotplan.config.scoring_config import (
    DEFAULT_SCORING_CONFIG,
    ScoringConfigError,
    build_scoring_config,
    clubs_for_area,
    resolve_scoring_config,
)


def test_defaults_match_documented_weights() -> None:
    config = DEFAULT_SCORING_CONFIG
    assert config.penalties.half_swing == -30
    assert config.penalties.trees_in_flight_path == -100
    assert config.bonuses.wide_fairway == 12
    assert config.thresholds.full_wedge_min == 75
    assert config.severity_for("water") == 40
    assert config.severity_for("lava") == config.default_hazard_severity


def test_overrides_merge_into_nested_sections() -> None:
    config = build_scoring_config({"penalties": {"half_swing": -45}})
    assert config.penalties.half_swing == -45
    assert config.penalties.awkward_distance == -10


@pytest.mark.parametrize(
    "overrides",
    [
        {"penalties": {"fairway_miss": 5}},
        {"bonuses": {"full_swing": -1}},
        {"thresholds": {"awkward_min": 80}},
        {"thresholds": {"default_dispersion_radius": 0}},
        {"penalties": {"unknown_weight": -1}},
        {"extra_section": {}},
    ],
)
def test_invalid_overrides_fail_fast(overrides: dict) -> None:
    with pytest.raises(ScoringConfigError):
        build_scoring_config(overrides)


def test_config_error_is_a_value_error() -> None:
    assert issubclass(ScoringConfigError, ValueError)


def test_resolve_layers_env_file_then_overrides(tmp_path, monkeypatch) -> None:
    path = tmp_path / "scoring.json"
    path.write_text(
        json.dumps({"penalties": {"half_swing": -40, "fairway_miss": -20}}), encoding="utf-8"
    )
    monkeypatch.setenv(SCORING_CONFIG_ENV, str(path))

    config = resolve_scoring_config({"penalties": {"fairway_miss": -5}})
    assert config.penalties.half_swing == -40
    assert config.penalties.fairway_miss == -5


def test_resolve_rejects_unreadable_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(SCORING_CONFIG_ENV, str(tmp_path / "missing.json"))
    with pytest.raises(ScoringConfigError):
        resolve_scoring_config()

    bad = tmp_path / "list.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    monkeypatch.setenv(SCORING_CONFIG_ENV, str(bad))
    with pytest.raises(ScoringConfigError):
        resolve_scoring_config()


def test_resolve_without_env_returns_defaults(monkeypatch) -> None:
    monkeypatch.delenv(SCORING_CONFIG_ENV, raising=False)
    assert resolve_scoring_config() == DEFAULT_SCORING_CONFIG


def test_clubs_for_area() -> None:
    assert "7_iron" in clubs_for_area("short_irons")
    assert clubs_for_area(None) == ()
    assert clubs_for_area("juggling") == ()


def test_env_helpers(monkeypatch) -> None:
    monkeypatch.setenv("SHOTPLAN_TEST_FLAG", "Yes")
    assert env_bool("SHOTPLAN_TEST_FLAG") is True
    monkeypatch.setenv("SHOTPLAN_TEST_FLAG", "nope")
    assert env_bool("SHOTPLAN_TEST_FLAG", True) is False
    monkeypatch.delenv("SHOTPLAN_TEST_FLAG")
    assert env_bool("SHOTPLAN_TEST_FLAG", True) is True

    assert coerce_boolish("off") is False
    assert coerce_boolish(1) is True
    assert coerce_boolish("maybe") is None
    assert coerce_boolish(None) is None
