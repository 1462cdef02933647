from __future__ import annotations

from enum import Enum, IntEnum


class ChartMode(str, Enum):
    HORIZONTAL = "horizontal"
    STACKED = "stacked"
    VERTICAL = "vertical"
    CALENDAR = "calendar"


class StatType(str, Enum):
    COMMITS = "commits"
    FILES_CHANGED = "fileschanged"
    INSERTIONS = "insertions"
    DELETIONS = "deletions"
    DELTA = "delta"


class IntensityScheme(str, Enum):
    FIXED = "fixed"
    QUANTILE = "quantile"


class Color(IntEnum):
    """Bright ANSI foreground codes."""

    BLACK = 90
    RED = 91
    GREEN = 92
    YELLOW = 93
    BLUE = 94
    MAGENTA = 95
    CYAN = 96
