from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from .errors import DataFormatError


@dataclass(frozen=True)
class SeriesModel:
    """Labels plus one row of values per label (``data[label][series]``).

    Consumed read-only by a single render pass.
    """

    labels: tuple[str, ...]
    data: tuple[tuple[float, ...], ...]
    colors: tuple[int, ...] = ()
    categories: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.labels) != len(self.data):
            raise DataFormatError(
                f"{len(self.labels)} labels but {len(self.data)} rows of values"
            )
        arity = len(self.data[0]) if self.data else None
        for i, row in enumerate(self.data):
            if not row:
                raise DataFormatError(f"label {self.labels[i]!r} has no values")
            if len(row) != arity:
                raise DataFormatError(
                    f"label {self.labels[i]!r} has {len(row)} values, expected {arity}"
                )
        count = self.series_count
        if self.colors and self.data and len(self.colors) != count:
            raise DataFormatError(
                f"{len(self.colors)} colors given for {count} series"
            )
        if self.categories and self.data and len(self.categories) != count:
            raise DataFormatError(
                f"{len(self.categories)} categories given for {count} series"
            )

    @classmethod
    def from_rows(
        cls,
        labels: Iterable[str],
        rows: Iterable[Iterable[float]],
        colors: Iterable[int] | None = None,
        categories: Iterable[str] | None = None,
    ) -> SeriesModel:
        return cls(
            labels=tuple(labels),
            data=tuple(tuple(float(v) for v in row) for row in rows),
            colors=tuple(colors or ()),
            categories=tuple(categories or ()),
        )

    @property
    def series_count(self) -> int:
        if self.data:
            return len(self.data[0])
        return len(self.colors) or len(self.categories)

    @property
    def is_empty(self) -> bool:
        return not self.labels

    def column(self, j: int) -> list[float]:
        return [row[j] for row in self.data]


@dataclass(frozen=True)
class CalendarCell:
    day: date
    week_offset: int
    weekday: int  # 0..6, relative to the configured first weekday
    value: float


@dataclass(frozen=True)
class CalendarGrid:
    """Dense day grid over ``[start, end]``; ``anchor`` is the first column's first day."""

    anchor: date
    start: date
    end: date
    first_weekday: int
    cells: tuple[CalendarCell, ...]

    @property
    def weeks(self) -> int:
        if not self.cells:
            return 0
        return self.cells[-1].week_offset + 1

    def lookup(self) -> dict[tuple[int, int], CalendarCell]:
        return {(c.week_offset, c.weekday): c for c in self.cells}

    def values(self) -> list[float]:
        return [c.value for c in self.cells]


def max_label_length(labels: Sequence[str]) -> int:
    return max((len(label) for label in labels), default=0)
