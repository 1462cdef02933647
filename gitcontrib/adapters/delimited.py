"""Delimited text input: ``label, value[, value...]`` per line."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from ..core.errors import DataFormatError
from ..core.logging_config import get_logger
from ..core.models import SeriesModel
from .base import BaseSource

logger = get_logger(__name__)

DELIM = ","


class DelimitedSource(BaseSource):
    """Parses rows of labeled values from a file or stdin.

    Blank lines and ``#`` comments are skipped. A line starting with ``@``
    names the series (categories), e.g. ``@ 2022,2023``.
    """

    def __init__(
        self,
        lines: Iterable[str],
        delimiter: str | None = None,
        colors: Iterable[int] = (),
    ):
        self.lines = lines
        self.delimiter = delimiter
        self.colors = tuple(colors)

    def _split(self, line: str) -> list[str]:
        if self.delimiter:
            return [c.strip() for c in line.split(self.delimiter)]
        if DELIM in line:
            return [c.strip() for c in line.split(DELIM)]
        return line.split()

    def load(self) -> SeriesModel:
        labels: list[str] = []
        rows: list[list[float]] = []
        categories: list[str] = []
        arity: int | None = len(self.colors) or None

        line_number = 0
        lines = iter(self.lines)
        while True:
            try:
                raw = next(lines)
            except StopIteration:
                break
            except UnicodeDecodeError as e:
                raise DataFormatError(
                    f"input is not valid UTF-8 ({e.reason})", line_number + 1
                ) from None
            line_number += 1
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if line.startswith("@"):
                categories = [c for c in self._split(line[1:]) if c]
                continue

            cols = self._split(line)
            if len(cols) < 2:
                raise DataFormatError("expected a label followed by at least one value", line_number, line)
            values = [self._parse_float(tok, line_number, line) for tok in cols[1:]]

            if arity is None:
                arity = len(values)
            elif len(values) != arity:
                expected = "colours" if self.colors else "values as earlier rows"
                raise DataFormatError(
                    f"row has {len(values)} values, expected {arity} to match the {expected}",
                    line_number,
                    line,
                )
            labels.append(cols[0])
            rows.append(values)

        logger.debug("Loaded delimited data", extra={"labels": len(labels), "series": arity or 0})
        return SeriesModel.from_rows(labels, rows, colors=self.colors, categories=categories)


def open_source(path: str | None) -> TextIO:
    """Open ``path`` for reading, or return stdin when no path (or ``-``) is given."""
    if not path or path == "-":
        return sys.stdin
    try:
        return open(path, encoding="utf-8")
    except FileNotFoundError:
        raise DataFormatError(f"data file not found: {path}") from None
    except OSError as e:
        raise DataFormatError(f"cannot read data file {path}: {e.strerror or e}") from None
