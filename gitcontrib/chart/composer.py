from __future__ import annotations

import sys
from typing import TextIO

from ..core.config import ChartConfig
from ..core.enums import ChartMode
from ..core.errors import ConfigurationError, DataFormatError
from ..core.logging_config import get_logger
from ..core.models import SeriesModel
from .calendar import bucket, parse_day, write_heatmap
from .normalize import find_min, normalize, tick_count
from .rows import TICK, RowRenderer, colorize

logger = get_logger(__name__)


class ChartComposer:
    """Renders a series model in the mode selected by its config.

    Stateless between calls: scales are recomputed on every ``render``.
    """

    def __init__(self, config: ChartConfig, stream: TextIO | None = None):
        self.config = config
        self.stream = stream

    def render(self, series: SeriesModel) -> None:
        """Write the chart to the stream.

        Raises:
            DataFormatError: If colors or calendar labels do not fit the data.
                Nothing is written in that case.
            ConfigurationError: If a calendar config has no start date.
        """
        stream = self.stream or sys.stdout
        mode = self.config.mode
        logger.debug(
            "Rendering chart",
            extra={
                "mode": mode.value,
                "labels": len(series.labels),
                "series": series.series_count,
            },
        )

        colors = self._series_colors(series)
        entries = None
        if mode is ChartMode.CALENDAR:
            if self.config.start_date is None:
                raise ConfigurationError("calendar charts need a start date")
            entries = [(parse_day(label), row[0]) for label, row in zip(series.labels, series.data)]
            if series.series_count > 1:
                logger.debug("Calendar charts use the first series only")

        if self.config.title:
            stream.write(f"# {self.config.title}\n\n")

        if series.is_empty:
            logger.warning("No data to chart")
            return

        if series.categories and mode is not ChartMode.CALENDAR:
            self._write_legend(series.categories, colors, stream)

        if mode is ChartMode.CALENDAR:
            grid = bucket(entries, self.config.start_date, self.config.first_weekday)
            write_heatmap(grid, self.config, stream, colors[0])
        elif mode is ChartMode.VERTICAL:
            self._vertical(series, colors, stream)
        elif mode is ChartMode.STACKED:
            self._stacked(series, colors, stream)
        else:
            self._horizontal(series, colors, stream)

    def _series_colors(self, series: SeriesModel) -> list[int | None]:
        count = series.series_count
        if series.colors:
            return list(series.colors)
        if self.config.colors:
            if len(self.config.colors) != count and not series.is_empty:
                raise DataFormatError(
                    f"{len(self.config.colors)} colours given for {count} series"
                )
            return list(self.config.colors)
        return [None] * max(count, 1)

    def _write_legend(
        self, categories: tuple[str, ...], colors: list[int | None], stream: TextIO
    ) -> None:
        tick = self.config.custom_tick or TICK
        entries = [
            f"{colorize(tick, color)} {name}" for name, color in zip(categories, colors)
        ]
        stream.write("  ".join(entries) + "\n\n")

    def _horizontal(
        self, series: SeriesModel, colors: list[int | None], stream: TextIO
    ) -> None:
        width = self.config.width
        count = series.series_count
        if self.config.different_scale:
            # Each series gets its own scale.
            columns = [normalize([series.column(j)], width)[0] for j in range(count)]
            normal = [[columns[j][i] for j in range(count)] for i in range(len(series.labels))]
            mins = [min(series.column(j)) for j in range(count)]
        else:
            normal = normalize(series.data, width)
            mins = [find_min(series.data)] * count

        renderer = RowRenderer(self.config, series.labels, stream)
        for i, label in enumerate(series.labels):
            ticks = [tick_count(v) for v in normal[i]]
            renderer.write_row(label, series.data[i], ticks, mins, colors)

    def _stacked(
        self, series: SeriesModel, colors: list[int | None], stream: TextIO
    ) -> None:
        normal = normalize(series.data, self.config.width)
        min_value = find_min(series.data)
        renderer = RowRenderer(self.config, series.labels, stream)
        for i, label in enumerate(series.labels):
            ticks = [tick_count(v) for v in normal[i]]
            renderer.write_stacked_row(label, series.data[i], ticks, min_value, colors)

    def _vertical(
        self, series: SeriesModel, colors: list[int | None], stream: TextIO
    ) -> None:
        normal = normalize(series.data, self.config.width)
        min_value = find_min(series.data)
        renderer = RowRenderer(self.config, series.labels, stream)

        # One column per value, grouped by label.
        columns: list[tuple[float, int, int | None, str]] = []
        for i, label in enumerate(series.labels):
            for j, value in enumerate(series.data[i]):
                columns.append((value, tick_count(normal[i][j]), colors[j], label if j == 0 else ""))

        heights = []
        for value, ticks, _, _ in columns:
            if ticks >= 1:
                heights.append(ticks)
            elif value > min_value or value > 0:
                heights.append(1)
            else:
                heights.append(0)

        for level in range(max(heights), 0, -1):
            cells = []
            for (_, ticks, color, _), height in zip(columns, heights):
                if height < level:
                    cells.append(" ")
                    continue
                glyph = renderer.tick if ticks >= 1 else (renderer.sm_tick or " ")
                cells.append(colorize(glyph, color))
            stream.write(" ".join(cells).rstrip() + "\n")

        rule = "-" * len(columns)
        values = [self.config.format.format(c[0]).strip() + self.config.suffix for c in columns]
        stream.write(f"{rule}Values{rule}\n")
        self._write_vertical_text(values, stream)
        if not self.config.no_labels:
            stream.write(f"{rule}Labels{rule}\n")
            self._write_vertical_text([c[3] for c in columns], stream)

    def _write_vertical_text(self, texts: list[str], stream: TextIO) -> None:
        """Write each text top-down in its own column."""
        depth = max((len(t) for t in texts), default=0)
        for k in range(depth):
            line = " ".join(t[k] if k < len(t) else " " for t in texts)
            stream.write(line.rstrip() + "\n")
