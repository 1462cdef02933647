"""Base interface for chart data sources."""

import math
from abc import ABC, abstractmethod

from ..core.errors import DataFormatError
from ..core.models import SeriesModel


class BaseSource(ABC):
    """Abstract base class for producers that feed the chart engine.

    All sources (delimited files, git history) return a ``SeriesModel`` so
    the composer never sees source-specific structures.
    """

    @abstractmethod
    def load(self) -> SeriesModel:
        """Read the source completely and build a series model.

        Returns:
            SeriesModel with labels in display order

        Raises:
            DataFormatError: If the input cannot be parsed into equal-arity rows
            ExternalProcessError: If a backing program fails

        Notes:
            - The whole dataset is loaded before rendering because scaling
              needs the global minimum and maximum
        """
        pass

    def _parse_float(self, token: str, line_number: int | None = None, line: str | None = None) -> float:
        """Convert a token to a finite float or raise DataFormatError with line context."""
        try:
            value = float(token.strip())
        except (TypeError, ValueError):
            raise DataFormatError(
                f"{token.strip()!r} is not a number", line_number=line_number, line=line
            ) from None
        if not math.isfinite(value):
            raise DataFormatError(
                f"{token.strip()!r} is not a finite number", line_number=line_number, line=line
            )
        return value
