"""Text-mode chart engine.

This package turns a ``SeriesModel`` (labels plus one or more numeric series)
into terminal charts built from block glyphs and ANSI color escapes.

Key Capabilities:
    1. Scaling of arbitrary-magnitude data onto a fixed tick width, with an
       offset for negative values
    2. Horizontal bars, one line per series value, on a shared or per-series scale
    3. Stacked bars with the row total as the trailing value
    4. Vertical columns with values and labels written underneath
    5. Calendar heatmaps of daily values on a week x weekday grid

Main Components:
    - normalize: pure scaling functions
    - RowRenderer: label column, tick segments and value tail for one row
    - ChartComposer: mode dispatch over a single ``ChartConfig``
    - bucket / write_heatmap: calendar grid construction and printing

Usage:
    from gitcontrib.chart import ChartComposer
    from gitcontrib.core.config import ChartConfig
    from gitcontrib.core.models import SeriesModel

    series = SeriesModel.from_rows(["Alice", "Bob"], [[10], [3]])
    ChartComposer(ChartConfig.from_options(width=20)).render(series)

Architecture Notes:
    - Rendering is synchronous and stateless; nothing is cached between calls
    - Horizontal and stacked rows are written one label at a time
    - Only the numeric series must be held in memory for the min/max scan
"""

from __future__ import annotations

from .calendar import bucket, intensity_levels, write_heatmap
from .composer import ChartComposer
from .normalize import find_max, find_min, normalize
from .rows import RowRenderer

__all__ = [
    "ChartComposer",
    "RowRenderer",
    "bucket",
    "find_max",
    "find_min",
    "intensity_levels",
    "normalize",
    "write_heatmap",
]
