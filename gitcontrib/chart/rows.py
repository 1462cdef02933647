from __future__ import annotations

from collections.abc import Sequence
from typing import TextIO

from ..core.config import ChartConfig
from ..core.models import max_label_length

TICK = "▇"
SM_TICK = "▏"
RESET = "\033[0m"


def colorize(text: str, color: int | None) -> str:
    if color is None or not text:
        return text
    return f"\033[{color}m{text}{RESET}"


class RowRenderer:
    """Writes horizontal chart rows, one label at a time.

    Each row is a label column, one segment of ticks per value and a tail
    with the formatted value, i.e::

        Alice: ▇▇▇▇▇▇▇▇▇▇ 10.00
        Bob  : ▇▇▇ 3.00
    """

    def __init__(self, config: ChartConfig, labels: Sequence[str], stream: TextIO):
        self.config = config
        self.stream = stream
        self.label_width = max_label_length(labels)
        self.tick = config.custom_tick or TICK
        # A custom tick has no sub-tick counterpart.
        self.sm_tick = "" if config.custom_tick else SM_TICK

    def label_prefix(self, label: str) -> str:
        if self.config.no_labels:
            return ""
        return f"{label:<{self.label_width}}: "

    def segment(
        self, value: float, ticks: int, min_value: float, color: int | None = None
    ) -> str:
        if ticks < 1 and (value > min_value or value > 0):
            # Print something if it's not the smallest
            # and the normal value is less than one.
            bar = self.sm_tick
        else:
            bar = self.tick * ticks
        return colorize(bar, color)

    def tail(self, value: float) -> str:
        return f" {self.config.format.format(value)}{self.config.suffix}"

    def write_row(
        self,
        label: str,
        values: Sequence[float],
        ticks: Sequence[int],
        mins: Sequence[float],
        colors: Sequence[int | None],
    ) -> None:
        """One line per series; only the first carries the label."""
        prefix = self.label_prefix(label)
        for j, value in enumerate(values):
            if j > 0:
                prefix = " " * len(prefix)
            line = prefix + self.segment(value, ticks[j], mins[j], colors[j]) + self.tail(value)
            self.stream.write(line + "\n")

    def write_stacked_row(
        self,
        label: str,
        values: Sequence[float],
        ticks: Sequence[int],
        min_value: float,
        colors: Sequence[int | None],
    ) -> None:
        bar = "".join(
            self.segment(value, ticks[j], min_value, colors[j])
            for j, value in enumerate(values)
        )
        self.stream.write(self.label_prefix(label) + bar + self.tail(sum(values)) + "\n")
