"""Tests for chart configuration, environment settings and presets."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from gitcontrib.core.config import (
    ChartConfig,
    get_settings,
    parse_color,
    parse_start_date,
    resolve_mode,
)
from gitcontrib.core.enums import ChartMode, Color, IntensityScheme
from gitcontrib.core.errors import ConfigurationError
from gitcontrib.core.presets import get_preset


def test_defaults() -> None:
    config = ChartConfig.from_options()
    assert config.width == 50
    assert config.format == "{:<5.2f}"
    assert config.mode is ChartMode.HORIZONTAL
    assert config.colors == ()


@pytest.mark.parametrize(
    "flags, mode",
    [
        ({}, ChartMode.HORIZONTAL),
        ({"stacked": True}, ChartMode.STACKED),
        ({"vertical": True}, ChartMode.VERTICAL),
        ({"calendar": True}, ChartMode.CALENDAR),
        ({"different_scale": True}, ChartMode.HORIZONTAL),
    ],
)
def test_resolve_mode(flags: dict, mode: ChartMode) -> None:
    options = {"vertical": False, "stacked": False, "different_scale": False, "calendar": False}
    options.update(flags)
    assert resolve_mode(**options) is mode


@pytest.mark.parametrize(
    "flags",
    [
        {"vertical": True, "calendar": True, "start_date": "2023-01-02"},
        {"stacked": True, "vertical": True},
        {"stacked": True, "calendar": True, "start_date": "2023-01-02"},
        {"stacked": True, "different_scale": True},
    ],
)
def test_conflicting_modes_are_rejected(flags: dict) -> None:
    with pytest.raises(ConfigurationError):
        ChartConfig.from_options(**flags)


def test_calendar_requires_start_date() -> None:
    with pytest.raises(ConfigurationError, match="start-date"):
        ChartConfig.from_options(calendar=True)


def test_start_date_rfc3339() -> None:
    config = ChartConfig.from_options(calendar=True, start_date="2023-01-02T00:00:00Z")
    assert config.start_date == date(2023, 1, 2)


def test_invalid_start_date() -> None:
    with pytest.raises(ConfigurationError, match="invalid start date"):
        parse_start_date("next tuesday")


@pytest.mark.parametrize("width", [0, -3])
def test_width_must_be_positive(width: int) -> None:
    with pytest.raises(ConfigurationError):
        ChartConfig.from_options(width=width)


@pytest.mark.parametrize("template", ["{:d}", "{0} {1}", "{name}"])
def test_format_template_must_format_a_float(template: str) -> None:
    with pytest.raises(ConfigurationError, match="invalid format template"):
        ChartConfig.from_options(format=template)


def test_colors_by_name_and_code() -> None:
    config = ChartConfig.from_options(colors=["Red", "94", 96])
    assert config.colors == (Color.RED.value, 94, 96)


def test_unknown_color() -> None:
    with pytest.raises(ConfigurationError, match="unknown colour 'teal'"):
        parse_color("teal")


def test_first_weekday_range() -> None:
    with pytest.raises(ConfigurationError):
        ChartConfig.from_options(first_weekday=7)


def test_unknown_intensity() -> None:
    with pytest.raises(ConfigurationError, match="intensity"):
        ChartConfig.from_options(intensity="loud")


def test_config_is_immutable() -> None:
    config = ChartConfig.from_options()
    with pytest.raises(AttributeError):
        config.width = 10  # type: ignore[misc]


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITCONTRIB_WIDTH", "30")
    monkeypatch.setenv("GITCONTRIB_COLOURS", "red, blue")
    monkeypatch.delenv("GITCONTRIB_GIT_BINARY", raising=False)
    monkeypatch.delenv("GIT", raising=False)
    settings = get_settings()
    assert settings.width == 30
    assert settings.colours == ("red", "blue")
    assert settings.git_binary == "git"


def test_settings_from_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITCONTRIB_FORMAT", raising=False)
    monkeypatch.delenv("GITCONTRIB_GNUPLOT_BINARY", raising=False)
    monkeypatch.delenv("GNUPLOT", raising=False)
    (tmp_path / ".env").write_text(
        "# local overrides\nGITCONTRIB_FORMAT='{:.0f}'\nGNUPLOT=/opt/bin/gnuplot\n", encoding="utf-8"
    )
    settings = get_settings()
    assert settings.format == "{:.0f}"
    assert settings.gnuplot_binary == "/opt/bin/gnuplot"


def test_settings_reject_non_integer_width(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITCONTRIB_WIDTH", "wide")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_preset_loading(tmp_path: Path) -> None:
    path = tmp_path / "charts.yaml"
    path.write_text(
        "presets:\n"
        "  weekly:\n"
        "    width: 20\n"
        "    colours: green\n"
        "    intensity: quantile\n",
        encoding="utf-8",
    )
    preset = get_preset("weekly", path)
    assert preset is not None
    assert preset.width == 20
    assert preset.colours == ("green",)
    assert preset.intensity is IntensityScheme.QUANTILE
    assert get_preset("missing", path) is None


def test_preset_with_unknown_intensity(tmp_path: Path) -> None:
    path = tmp_path / "charts.yaml"
    path.write_text("presets:\n  bad:\n    intensity: loud\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        get_preset("bad", path)


def test_missing_presets_file(tmp_path: Path) -> None:
    assert get_preset("anything", tmp_path / "nope.yaml") is None
