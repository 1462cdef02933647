from __future__ import annotations

import typer

from .. import __version__
from ..adapters.delimited import DelimitedSource, open_source
from ..adapters.git import GitLogSource, to_series
from ..chart.composer import ChartComposer
from ..core.config import DEFAULT_FORMAT, DEFAULT_WIDTH, ChartConfig, Settings, get_settings
from ..core.enums import IntensityScheme, StatType
from ..core.errors import ConfigurationError, DataFormatError, ExternalProcessError
from ..core.logging_config import get_logger, setup_logging
from ..core.models import SeriesModel
from ..core.presets import ChartPreset, get_preset
from ..render.gnuplot import PiePlotter
from . import output as cli_output

app = typer.Typer(help="gitcontrib: terminal charts for tabular data and git history")

logger = get_logger(__name__)


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
    log_file: str | None = typer.Option(None, "--log-file", help="Also write JSON logs to this file"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output, same as --log-level DEBUG"),
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level="DEBUG" if verbose else log_level, log_file=log_file)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


def _first(*values):
    for v in values:
        if v is not None:
            return v
    return None


def _split_colours(colour: list[str] | None) -> list[str]:
    return [c.strip() for item in colour or [] for c in item.split(",") if c.strip()]


def _resolve_preset(preset: str | None) -> ChartPreset | None:
    if not preset:
        return None
    p = get_preset(preset)
    if p is None:
        raise ConfigurationError(f"Preset '{preset}' not found in configs/charts.yaml")
    return p


def _build_config(
    settings: Settings,
    preset: ChartPreset | None,
    *,
    width: int | None,
    format: str | None,
    suffix: str | None,
    colour: list[str] | None,
    title: str | None,
    no_labels: bool = False,
    vertical: bool = False,
    stacked: bool = False,
    different_scale: bool = False,
    calendar: bool = False,
    start_date: str | None = None,
    custom_tick: str | None = None,
    delim: str | None = None,
    first_weekday: int | None = None,
    intensity: IntensityScheme | None = None,
) -> ChartConfig:
    # Precedence: explicit flag -> preset -> environment settings -> default
    colours = _split_colours(colour) or list(preset.colours if preset else ()) or list(settings.colours)
    return ChartConfig.from_options(
        width=_first(width, preset and preset.width, settings.width, DEFAULT_WIDTH),
        format=_first(format, preset and preset.format, settings.format, DEFAULT_FORMAT),
        suffix=_first(suffix, preset and preset.suffix, ""),
        no_labels=no_labels,
        vertical=vertical,
        stacked=stacked,
        different_scale=different_scale,
        calendar=calendar,
        start_date=start_date,
        custom_tick=_first(custom_tick, preset and preset.custom_tick),
        delimiter=_first(delim, preset and preset.delimiter),
        colors=colours,
        title=_first(title, preset and preset.title),
        first_weekday=_first(first_weekday, preset and preset.first_weekday, 0),
        intensity=_first(intensity, preset and preset.intensity, IntensityScheme.FIXED),
    )


def _render(config: ChartConfig, series: SeriesModel) -> None:
    try:
        ChartComposer(config).render(series)
    except (ConfigurationError, DataFormatError) as e:
        cli_output.error(f"Cannot render chart: {e}")
        raise typer.Exit(code=1) from e


@app.command()
def chart(
    file: str | None = typer.Option(
        None, "--file", help="Data file name (comma or space separated). Defaults to stdin."
    ),
    title: str | None = typer.Option(None, help="Title of graph."),
    width: int | None = typer.Option(None, help=f"Width of graph (default {DEFAULT_WIDTH})."),
    format: str | None = typer.Option(
        None, "--format", help=f"Format specifier to use (default '{DEFAULT_FORMAT}')."
    ),
    suffix: str | None = typer.Option(None, help="String to add as a suffix to all data points."),
    no_labels: bool = typer.Option(False, "--no-labels", help="Do not print the label column."),
    colour: list[str] | None = typer.Option(
        None, "--colour", "--color", help="Bar colour(s), one per series (repeat or comma-separate)."
    ),
    vertical: bool = typer.Option(False, "--vertical", help="Vertical graph."),
    stacked: bool = typer.Option(False, "--stacked", help="Stacked bar graph."),
    different_scale: bool = typer.Option(
        False, "--different-scale", help="Categories have different scales."
    ),
    calendar: bool = typer.Option(False, "--calendar", help="Calendar heatmap chart."),
    start_date: str | None = typer.Option(
        None, "--start-date", help="Start date for calendar chart (RFC-3339, e.g. 2023-01-02T00:00:00Z)."
    ),
    custom_tick: str | None = typer.Option(None, "--custom-tick", help="Custom tick mark, emoji approved."),
    delim: str | None = typer.Option(None, "--delim", help="Custom delimiter, default ',' or ' '."),
    first_weekday: int | None = typer.Option(
        None, "--first-weekday", help="First row of the calendar: 0=Monday .. 6=Sunday."
    ),
    intensity: IntensityScheme | None = typer.Option(
        None, case_sensitive=False, help="Calendar intensity buckets: fixed|quantile."
    ),
    preset: str | None = typer.Option(None, help="Named preset from configs/charts.yaml."),
) -> None:
    """Chart labeled values read from a file or stdin.

    Each line is 'label,value[,value...]'. Lines starting with '@' name the
    series, lines starting with '#' are comments.

    Example:
        printf 'Alice,10\\nBob,3\\n' | gitcontrib chart --colour blue
    """
    try:
        settings = get_settings()
        config = _build_config(
            settings,
            _resolve_preset(preset),
            width=width,
            format=format,
            suffix=suffix,
            colour=colour,
            title=title,
            no_labels=no_labels,
            vertical=vertical,
            stacked=stacked,
            different_scale=different_scale,
            calendar=calendar,
            start_date=start_date,
            custom_tick=custom_tick,
            delim=delim,
            first_weekday=first_weekday,
            intensity=intensity,
        )
    except ConfigurationError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from e

    try:
        stream = open_source(file)
        try:
            series = DelimitedSource(stream, delimiter=config.delimiter, colors=config.colors).load()
        finally:
            if file and file != "-":
                stream.close()
    except DataFormatError as e:
        logger.debug("Failed to parse chart data", extra={"file": file})
        cli_output.error(f"Invalid data: {e}")
        raise typer.Exit(code=1) from e

    logger.info(
        "Chart data loaded",
        extra={"labels": len(series.labels), "series": series.series_count, "mode": config.mode.value},
    )
    _render(config, series)


@app.command()
def git(
    repo: str = typer.Option(".", help="Path of repo to pull statistics for."),
    stat: StatType = typer.Option(  # noqa: B008
        StatType.COMMITS,
        case_sensitive=False,
        help="Stat to plot: commits|fileschanged|insertions|deletions|delta.",
    ),
    plot: bool = typer.Option(False, "--plot", help="Draw a gnuplot pie chart instead of bars."),
    details: bool = typer.Option(False, "--details", help="Print per-author totals after the chart."),
    title: str | None = typer.Option(None, help="Title of graph."),
    width: int | None = typer.Option(None, help=f"Width of graph (default {DEFAULT_WIDTH})."),
    format: str | None = typer.Option(None, "--format", help="Format specifier to use."),
    suffix: str | None = typer.Option(None, help="String to add as a suffix to all data points."),
    no_labels: bool = typer.Option(False, "--no-labels", help="Do not print the label column."),
    colour: list[str] | None = typer.Option(None, "--colour", "--color", help="Bar colour."),
    preset: str | None = typer.Option(None, help="Named preset from configs/charts.yaml."),
) -> None:
    """Chart per-author statistics from a repository's history.

    Example:
        gitcontrib git --repo ../project --stat insertions --colour green
    """
    try:
        settings = get_settings()
        config = _build_config(
            settings,
            _resolve_preset(preset),
            width=width,
            format=format,
            suffix=suffix,
            colour=colour,
            title=title,
            no_labels=no_labels,
        )
    except ConfigurationError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from e

    source = GitLogSource(repo, stat, git_binary=settings.git_binary, colors=config.colors)
    try:
        stats = source.collect()
    except (ExternalProcessError, DataFormatError) as e:
        logger.exception("git history aggregation failed", extra={"repo": repo})
        cli_output.error(f"Failed to read git history: {e}")
        raise typer.Exit(code=1) from e

    try:
        series = to_series(stats, stat, config.colors)
    except DataFormatError as e:
        cli_output.error(f"Cannot chart {stat.value}: {e}")
        raise typer.Exit(code=1) from e

    if plot:
        try:
            PiePlotter(gnuplot_binary=settings.gnuplot_binary).plot(series, title=config.title)
        except ExternalProcessError as e:
            cli_output.error(f"Plot failed: {e}")
            raise typer.Exit(code=1) from e
        cli_output.success(f"Plotted {stat.value} for {len(series.labels)} authors")
    else:
        _render(config, series)

    if details:
        for s in sorted(stats.values(), key=lambda s: (-s.get(stat), s.name)):
            cli_output.plain(
                f"\nName: {s.name}\nEmail: {s.email}\nCommits: {s.commits}\n"
                f"Files Changed: {s.files_changed}\nInsertions: {s.insertions}\n"
                f"Deletions: {s.deletions}\nDelta: {s.delta}"
            )
