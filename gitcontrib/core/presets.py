from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from .enums import IntensityScheme
from .errors import ConfigurationError

DEFAULT_PRESETS_PATH = Path("configs/charts.yaml")


@dataclass(frozen=True)
class ChartPreset:
    id: str
    width: int | None = None
    format: str | None = None
    suffix: str | None = None
    colours: tuple[str, ...] = ()
    custom_tick: str | None = None
    delimiter: str | None = None
    title: str | None = None
    first_weekday: int | None = None
    intensity: IntensityScheme | None = None


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_preset(preset_id: str, path: Path | None = None) -> ChartPreset | None:
    data = _load_yaml(path or DEFAULT_PRESETS_PATH)
    presets = data.get("presets", {})
    cfg = presets.get(preset_id)
    if not cfg:
        return None
    colours = cfg.get("colours") or cfg.get("colors") or ()
    if isinstance(colours, str):
        colours = [colours]
    intensity = cfg.get("intensity")
    if intensity and intensity not in {s.value for s in IntensityScheme}:
        raise ConfigurationError(f"preset '{preset_id}' has unknown intensity '{intensity}'")
    return ChartPreset(
        id=preset_id,
        width=cfg.get("width"),
        format=cfg.get("format"),
        suffix=cfg.get("suffix"),
        colours=tuple(str(c) for c in colours),
        custom_tick=cfg.get("custom_tick"),
        delimiter=cfg.get("delim"),
        title=cfg.get("title"),
        first_weekday=cfg.get("first_weekday"),
        intensity=IntensityScheme(intensity) if intensity else None,
    )
