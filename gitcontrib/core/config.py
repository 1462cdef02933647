from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from .enums import ChartMode, Color, IntensityScheme
from .errors import ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_WIDTH = 50
DEFAULT_FORMAT = "{:<5.2f}"


@dataclass(frozen=True)
class Settings:
    width: int | None
    format: str | None
    colours: tuple[str, ...]
    git_binary: str
    gnuplot_binary: str


@dataclass(frozen=True)
class ChartConfig:
    """Immutable options for one render call."""

    width: int = DEFAULT_WIDTH
    format: str = DEFAULT_FORMAT
    suffix: str = ""
    no_labels: bool = False
    mode: ChartMode = ChartMode.HORIZONTAL
    different_scale: bool = False
    start_date: date | None = None
    custom_tick: str | None = None
    delimiter: str | None = None
    colors: tuple[int, ...] = ()
    title: str | None = None
    first_weekday: int = 0
    intensity: IntensityScheme = IntensityScheme.FIXED

    @classmethod
    def from_options(
        cls,
        *,
        width: int = DEFAULT_WIDTH,
        format: str = DEFAULT_FORMAT,
        suffix: str = "",
        no_labels: bool = False,
        vertical: bool = False,
        stacked: bool = False,
        different_scale: bool = False,
        calendar: bool = False,
        start_date: str | date | None = None,
        custom_tick: str | None = None,
        delimiter: str | None = None,
        colors: Iterable[str | int] | None = None,
        title: str | None = None,
        first_weekday: int = 0,
        intensity: IntensityScheme | str = IntensityScheme.FIXED,
    ) -> ChartConfig:
        """Validate flag combinations and build the tagged chart mode.

        Raises:
            ConfigurationError: On conflicting modes or invalid option values,
                before any data is read.
        """
        mode = resolve_mode(
            vertical=vertical,
            stacked=stacked,
            different_scale=different_scale,
            calendar=calendar,
        )

        if width < 1:
            raise ConfigurationError(f"width must be a positive integer, got {width}")
        validate_format(format)

        parsed_start: date | None = None
        if isinstance(start_date, datetime):
            parsed_start = start_date.date()
        elif isinstance(start_date, date):
            parsed_start = start_date
        elif start_date:
            parsed_start = parse_start_date(start_date)
        if mode is ChartMode.CALENDAR and parsed_start is None:
            raise ConfigurationError("--start-date is required for calendar charts")

        if not 0 <= first_weekday <= 6:
            raise ConfigurationError(
                f"first weekday must be between 0 (Monday) and 6 (Sunday), got {first_weekday}"
            )

        try:
            scheme = IntensityScheme(intensity)
        except ValueError:
            raise ConfigurationError(
                f"unknown intensity scheme '{intensity}'. Use: fixed, quantile"
            ) from None

        return cls(
            width=width,
            format=format,
            suffix=suffix,
            no_labels=no_labels,
            mode=mode,
            different_scale=different_scale,
            start_date=parsed_start,
            custom_tick=custom_tick or None,
            delimiter=delimiter or None,
            colors=tuple(parse_color(c) for c in colors or ()),
            title=title or None,
            first_weekday=first_weekday,
            intensity=scheme,
        )


def resolve_mode(
    *, vertical: bool, stacked: bool, different_scale: bool, calendar: bool
) -> ChartMode:
    if vertical and calendar:
        raise ConfigurationError("--vertical and --calendar cannot be used together")
    if stacked and (vertical or calendar):
        raise ConfigurationError("--stacked only applies to horizontal charts")
    if stacked and different_scale:
        raise ConfigurationError(
            "--stacked and --different-scale cannot be used together; stacked bars share one scale"
        )
    if calendar:
        return ChartMode.CALENDAR
    if vertical:
        return ChartMode.VERTICAL
    if stacked:
        return ChartMode.STACKED
    return ChartMode.HORIZONTAL


def validate_format(template: str) -> None:
    try:
        template.format(0.0)
    except (ValueError, IndexError, KeyError) as e:
        raise ConfigurationError(f"invalid format template {template!r}: {e}") from e


def parse_start_date(text: str) -> date:
    """Parse an RFC-3339 timestamp or a plain ``YYYY-MM-DD`` date."""
    try:
        return datetime.fromisoformat(text.strip()).date()
    except ValueError:
        raise ConfigurationError(
            f"invalid start date {text!r}; expected RFC-3339 (e.g. 2023-01-02T00:00:00Z)"
        ) from None


def parse_color(value: str | int) -> int:
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.isdigit():
        return int(text)
    try:
        return Color[text.upper()].value
    except KeyError:
        names = ", ".join(c.name.lower() for c in Color)
        raise ConfigurationError(f"unknown colour '{value}'. Use one of: {names}") from None


def _read_env_file() -> dict[str, str]:
    """Load a minimal .env for GITCONTRIB_* keys missing from the environment."""
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        text = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable .env file", extra={"error": str(e)})
        return {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        env[k.strip()] = v.strip().strip('"').strip("'")
    return env


def _get_env(
    name: str,
    fallback_names: list[str] | None = None,
    env_file: dict[str, str] | None = None,
) -> str | None:
    # Priority: process env -> .env -> fallback names
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    if fallback_names:
        for fb in fallback_names:
            v = os.getenv(fb)
            if v:
                return v
            if env_file and fb in env_file:
                return env_file[fb]
    return None


def get_settings() -> Settings:
    env_file = _read_env_file()
    width = _get_env("GITCONTRIB_WIDTH", None, env_file)
    fmt = _get_env("GITCONTRIB_FORMAT", None, env_file)
    colours = _get_env("GITCONTRIB_COLOURS", ["GITCONTRIB_COLORS"], env_file)
    git = _get_env("GITCONTRIB_GIT_BINARY", ["GIT"], env_file)
    gnuplot = _get_env("GITCONTRIB_GNUPLOT_BINARY", ["GNUPLOT"], env_file)

    parsed_width: int | None = None
    if width:
        try:
            parsed_width = int(width)
        except ValueError:
            raise ConfigurationError(f"GITCONTRIB_WIDTH must be an integer, got {width!r}") from None

    return Settings(
        width=parsed_width,
        format=fmt,
        colours=tuple(c.strip() for c in colours.split(",") if c.strip()) if colours else (),
        git_binary=git or "git",
        gnuplot_binary=gnuplot or "gnuplot",
    )
