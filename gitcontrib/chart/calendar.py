"""Calendar heatmap: daily values on a week x weekday grid."""

from __future__ import annotations

import unicodedata
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import TextIO

import numpy as np

from ..core.config import ChartConfig
from ..core.enums import Color, IntensityScheme
from ..core.errors import DataFormatError
from ..core.logging_config import get_logger
from ..core.models import CalendarCell, CalendarGrid
from .rows import colorize

logger = get_logger(__name__)

DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
HEAT_TICKS = (" ", "░", "▒", "▓", "█")


def parse_day(label: str) -> date:
    try:
        return datetime.fromisoformat(label.strip()).date()
    except ValueError:
        raise DataFormatError(f"calendar label {label!r} is not an ISO-8601 date") from None


def week_anchor(start: date, first_weekday: int = 0) -> date:
    """First day of the week containing ``start``."""
    return start - timedelta(days=(start.weekday() - first_weekday) % 7)


def bucket(
    entries: Iterable[tuple[date, float]], start: date, first_weekday: int = 0
) -> CalendarGrid:
    """Place daily values on a dense grid covering ``start`` to the latest entry.

    Entries for the same day are summed; days without entries are zero
    cells. Entries before ``start`` are dropped.
    """
    totals: dict[date, float] = defaultdict(float)
    dropped = 0
    for day, value in entries:
        if day < start:
            dropped += 1
            continue
        totals[day] += value
    if dropped:
        logger.debug(
            "Dropped entries before calendar start",
            extra={"dropped": dropped, "start": start.isoformat()},
        )

    end = max(totals) if totals else start
    anchor = week_anchor(start, first_weekday)
    cells = []
    day = start
    while day <= end:
        cells.append(
            CalendarCell(
                day=day,
                week_offset=(day - anchor).days // 7,
                weekday=(day.weekday() - first_weekday) % 7,
                value=totals.get(day, 0.0),
            )
        )
        day += timedelta(days=1)
    return CalendarGrid(
        anchor=anchor,
        start=start,
        end=end,
        first_weekday=first_weekday,
        cells=tuple(cells),
    )


def intensity_levels(
    values: Sequence[float],
    scheme: IntensityScheme = IntensityScheme.FIXED,
    levels: int = len(HEAT_TICKS),
) -> list[int]:
    """Map values to display levels ``0..levels-1``.

    Level 0 is reserved for values <= 0. FIXED splits the positive range
    into equal fractions of the maximum; QUANTILE uses quantiles of the
    positive values.
    """
    positives = [v for v in values if v > 0]
    if not positives:
        return [0 for _ in values]

    fractions = [k / (levels - 1) for k in range(1, levels - 1)]
    if scheme is IntensityScheme.QUANTILE:
        thresholds = np.quantile(np.asarray(positives, dtype=float), fractions)
    else:
        thresholds = np.asarray(fractions, dtype=float) * max(positives)
    top = max(positives)

    result = []
    for v in values:
        if v <= 0:
            result.append(0)
        elif v >= top:
            # Busiest days always get the strongest glyph, even when quantiles collapse.
            result.append(levels - 1)
        else:
            # One level above the number of thresholds strictly below v.
            result.append(1 + int(np.searchsorted(thresholds, v, side="left")))
    return result


def _cell_width(tick: str) -> int:
    if any(unicodedata.east_asian_width(ch) in ("W", "F") for ch in tick):
        return 2
    return max(1, len(tick))


def _month_header(grid: CalendarGrid, cell_width: int) -> str:
    """Month abbreviations above the first week column of each month."""
    header = ""
    previous_month = None
    for week in range(grid.weeks):
        first_day = max(grid.anchor + timedelta(days=7 * week), grid.start)
        month = (first_day.year, first_day.month)
        if month == previous_month:
            continue
        previous_month = month
        pos = week * cell_width
        # Skip a month whose name would touch the previous one.
        if not header or pos > len(header):
            header = header.ljust(pos) + first_day.strftime("%b")
    return header


def write_heatmap(
    grid: CalendarGrid, config: ChartConfig, stream: TextIO, color: int | None = None
) -> None:
    """Print the month header and one row per weekday, one cell per week."""
    ticks = HEAT_TICKS
    if config.custom_tick:
        ticks = (" ",) + (config.custom_tick,) * (len(HEAT_TICKS) - 1)
    cell_width = _cell_width(ticks[-1])
    if color is None:
        color = config.colors[0] if config.colors else Color.BLUE.value

    levels = dict(
        zip(
            (c.day for c in grid.cells),
            intensity_levels(grid.values(), config.intensity, len(ticks)),
        )
    )
    cells = grid.lookup()
    prefix_width = 0 if config.no_labels else len(DAYS[0]) + 2

    stream.write((" " * prefix_width + _month_header(grid, cell_width)).rstrip() + "\n")
    for weekday in range(7):
        line = []
        if not config.no_labels:
            line.append(DAYS[(grid.first_weekday + weekday) % 7] + ": ")
        for week in range(grid.weeks):
            cell = cells.get((week, weekday))
            if cell is None:
                line.append(" " * cell_width)
                continue
            level = levels[cell.day]
            glyph = ticks[level]
            pad = " " * (cell_width - _cell_width(glyph))
            line.append(colorize(glyph, color if level else None) + pad)
        stream.write("".join(line).rstrip() + "\n")
