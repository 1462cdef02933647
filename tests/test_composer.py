"""Tests for chart mode orchestration."""

from __future__ import annotations

import io
from datetime import date

import pytest

from gitcontrib.chart.composer import ChartComposer
from gitcontrib.chart.rows import RESET, SM_TICK, TICK
from gitcontrib.core.config import ChartConfig
from gitcontrib.core.enums import ChartMode
from gitcontrib.core.errors import ConfigurationError, DataFormatError
from gitcontrib.core.models import SeriesModel


def _render(series: SeriesModel, **options) -> str:
    stream = io.StringIO()
    ChartComposer(ChartConfig.from_options(**options), stream).render(series)
    return stream.getvalue()


def test_horizontal_scenario_most_ticks_for_largest_value() -> None:
    series = SeriesModel.from_rows(["Alice", "Bob", "Carol"], [[10], [3], [0]])
    lines = _render(series).splitlines()
    assert lines == [
        f"Alice: {TICK * 10} 10.00",
        f"Bob  : {TICK * 3} 3.00 ",
        "Carol:  0.00 ",
    ]
    assert SM_TICK not in lines[2]


def test_horizontal_negative_values_are_offset() -> None:
    series = SeriesModel.from_rows(["X", "Y"], [[-5], [5]])
    lines = _render(series, width=10).splitlines()
    assert lines[0] == "X:  -5.00"
    assert lines[1] == f"Y: {TICK * 10} 5.00 "


def test_horizontal_partial_tick_for_small_value() -> None:
    series = SeriesModel.from_rows(["big", "small"], [[100], [0.5]])
    lines = _render(series, width=10).splitlines()
    assert lines[0].count(TICK) == 10
    assert SM_TICK in lines[1]


def test_different_scale_normalizes_each_series_independently() -> None:
    series = SeriesModel.from_rows(["A", "B"], [[1, 100, 1000], [2, 50, 500]])
    lines = _render(series, width=10, different_scale=True).splitlines()
    assert [line.count(TICK) for line in lines] == [1, 10, 10, 2, 5, 5]


def test_shared_scale_compares_series_magnitudes() -> None:
    series = SeriesModel.from_rows(["A", "B"], [[1, 100, 1000], [2, 50, 500]])
    lines = _render(series, width=10).splitlines()
    assert [line.count(TICK) for line in lines] == [0, 1, 10, 0, 0, 5]


def test_stacked_row_total_matches_raw_sum() -> None:
    series = SeriesModel.from_rows(["A", "B"], [[1.25, 2.5], [300, 0.75]], colors=[91, 94])
    out = _render(series, stacked=True, width=20, format="{:.2f}")
    lines = out.splitlines()
    assert lines[0].endswith(" 3.75")
    assert lines[1].endswith(" 300.75")
    assert "\033[91m" in lines[0] and "\033[94m" in lines[0]


def test_stacked_output_exact() -> None:
    series = SeriesModel.from_rows(["A", "B"], [[1, 2], [3, 4]])
    assert _render(series, stacked=True).splitlines() == [
        f"A: {TICK * 3} 3.00 ",
        f"B: {TICK * 7} 7.00 ",
    ]


def test_vertical_columns_values_and_labels() -> None:
    series = SeriesModel.from_rows(["A", "B"], [[3], [1]])
    assert _render(series, vertical=True).splitlines() == [
        TICK,
        TICK,
        f"{TICK} {TICK}",
        "--Values--",
        "3 1",
        ". .",
        "0 0",
        "0 0",
        "--Labels--",
        "A B",
    ]


def test_vertical_without_labels() -> None:
    series = SeriesModel.from_rows(["A", "B"], [[2], [2]])
    out = _render(series, vertical=True, no_labels=True)
    assert "Labels" not in out
    assert out.splitlines()[:2] == [f"{TICK} {TICK}", f"{TICK} {TICK}"]


def test_title_and_legend_are_printed_first() -> None:
    series = SeriesModel.from_rows(["A"], [[1, 2]], categories=["2022", "2023"])
    lines = _render(series, title="Sales").splitlines()
    assert lines[:4] == ["# Sales", "", f"{TICK} 2022  {TICK} 2023", ""]


def test_colors_from_config_apply_per_series() -> None:
    series = SeriesModel.from_rows(["A"], [[2, 1]])
    lines = _render(series, colors=["red", "blue"]).splitlines()
    assert lines[0] == f"A: \033[91m{TICK * 2}{RESET} 2.00 "
    assert lines[1] == f"   \033[94m{TICK}{RESET} 1.00 "


def test_color_count_mismatch_fails_before_writing() -> None:
    series = SeriesModel.from_rows(["A"], [[2, 1]])
    stream = io.StringIO()
    config = ChartConfig.from_options(colors=["red"], title="never printed")
    with pytest.raises(DataFormatError, match="1 colours given for 2 series"):
        ChartComposer(config, stream).render(series)
    assert stream.getvalue() == ""


def test_empty_dataset_renders_only_title() -> None:
    series = SeriesModel.from_rows([], [])
    assert _render(series, title="Nothing") == "# Nothing\n\n"


def test_all_equal_values_render_flat_chart() -> None:
    series = SeriesModel.from_rows(["a", "b", "c"], [[4], [4], [4]])
    lines = _render(series).splitlines()
    assert {line.count(TICK) for line in lines} == {4}


def test_calendar_scenario_places_values_in_monday_row() -> None:
    series = SeriesModel.from_rows(["2023-01-02", "2023-01-09"], [[3], [1]])
    lines = _render(series, calendar=True, start_date="2023-01-02T00:00:00Z").splitlines()
    assert lines[0] == "     Jan"
    assert lines[1] == "Mon: \033[94m█\033[0m\033[94m▒\033[0m"
    assert lines[2:] == ["Tue:", "Wed:", "Thu:", "Fri:", "Sat:", "Sun:"]


def test_calendar_rejects_non_date_labels_without_output() -> None:
    series = SeriesModel.from_rows(["yesterday"], [[3]])
    stream = io.StringIO()
    config = ChartConfig.from_options(calendar=True, start_date="2023-01-02", title="T")
    with pytest.raises(DataFormatError, match="not an ISO-8601 date"):
        ChartComposer(config, stream).render(series)
    assert stream.getvalue() == ""


def test_calendar_config_without_start_date_is_rejected() -> None:
    config = ChartConfig(mode=ChartMode.CALENDAR)
    with pytest.raises(ConfigurationError):
        ChartComposer(config, io.StringIO()).render(SeriesModel.from_rows(["2023-01-02"], [[1]]))


def test_render_is_stateless_between_calls() -> None:
    composer_stream = io.StringIO()
    composer = ChartComposer(ChartConfig.from_options(width=10), composer_stream)
    composer.render(SeriesModel.from_rows(["a"], [[1000]]))
    first = composer_stream.getvalue()
    composer.render(SeriesModel.from_rows(["a"], [[5]]))
    second = composer_stream.getvalue()[len(first):]
    assert first.count(TICK) == 10
    assert second.count(TICK) == 5


def test_calendar_start_date_may_be_a_date() -> None:
    config = ChartConfig.from_options(calendar=True, start_date=date(2023, 1, 2))
    assert config.start_date == date(2023, 1, 2)
