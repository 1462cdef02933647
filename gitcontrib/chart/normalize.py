from __future__ import annotations

import math
from collections.abc import Sequence


def find_min(rows: Sequence[Sequence[float]]) -> float:
    return min(v for row in rows for v in row)


def find_max(rows: Sequence[Sequence[float]]) -> float:
    return max(v for row in rows for v in row)


def normalize(rows: Sequence[Sequence[float]], width: float) -> list[list[float]]:
    """Scale values so the largest one spans at most ``width`` ticks.

    A negative minimum is first offset to zero so every bar has a
    non-negative length. Values already within ``width`` are returned
    unscaled. The input is never mutated.
    """
    if not rows or not any(rows):
        raise ValueError("normalize() needs at least one value")

    min_value = find_min(rows)
    # Offset by the minimum if there's a negative.
    if min_value < 0:
        offset = abs(min_value)
        off_rows = [[v + offset for v in row] for row in rows]
    else:
        off_rows = [list(row) for row in rows]

    max_value = find_max(off_rows)
    if max_value <= width or max_value == 0:
        return off_rows

    # width / max_value is the number of ticks per unit of value. Multiply
    # before dividing so the largest value maps to exactly ``width``.
    return [[min(v * width / max_value, width) for v in row] for row in off_rows]


def tick_count(value: float) -> int:
    """Whole ticks for a normalized value (truncated toward zero)."""
    return int(math.trunc(value))
