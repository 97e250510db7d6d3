"""Tests for the time axis planner."""

from datetime import date, timedelta

import pytest

from starplot.errors import EmptyDataset, InvalidDuration
from starplot.models import AbsoluteDay, AxisKind, RelativeDay, TimeScale, TimeUnit
from starplot.timescale import choose_time_scale, format_offset, plan_axis, tick_offsets


@pytest.mark.parametrize(
    "duration, unit, step",
    [
        (0, TimeUnit.DAY, 7),
        (45, TimeUnit.DAY, 7),
        (60, TimeUnit.DAY, 7),
        (61, TimeUnit.MONTH, 1),
        (200, TimeUnit.MONTH, 1),
        (365, TimeUnit.MONTH, 1),
        (366, TimeUnit.QUARTER, 1),
        (1095, TimeUnit.QUARTER, 1),
        (1500, TimeUnit.YEAR, 1),
        (3650, TimeUnit.YEAR, 1),
        (4000, TimeUnit.BIENNIUM, 1),
    ],
)
def test_choose_time_scale(duration: int, unit: TimeUnit, step: int) -> None:
    """Test the first matching threshold picks the scale."""
    assert choose_time_scale(duration) == TimeScale(unit, step)


def test_negative_duration() -> None:
    """Test a range ending before it starts is an internal error."""
    with pytest.raises(InvalidDuration) as excinfo:
        choose_time_scale(-1)

    assert excinfo.value.duration == -1
    assert not excinfo.value.client_error


def test_tick_offsets_include_duration() -> None:
    """Test ticks run from 0 up to and including the duration."""
    assert tick_offsets(TimeScale(TimeUnit.DAY, 7), 45) == [0, 7, 14, 21, 28, 35, 42]
    assert tick_offsets(TimeScale(TimeUnit.DAY, 7), 42) == [0, 7, 14, 21, 28, 35, 42]
    assert tick_offsets(TimeScale(TimeUnit.DAY, 7), 0) == [0]


@pytest.mark.parametrize(
    "offset, scale, label",
    [
        (0, TimeScale(TimeUnit.DAY, 7), "0"),
        (7, TimeScale(TimeUnit.DAY, 7), "7d"),
        (14, TimeScale(TimeUnit.DAY, 7), "14d"),
        (30, TimeScale(TimeUnit.MONTH, 1), "1m"),
        (330, TimeScale(TimeUnit.MONTH, 1), "11m"),
        (90, TimeScale(TimeUnit.QUARTER, 1), "3m"),
        (180, TimeScale(TimeUnit.QUARTER, 1), "6m"),
        (365, TimeScale(TimeUnit.YEAR, 1), "1y"),
        (730, TimeScale(TimeUnit.BIENNIUM, 1), "2y"),
        (1460, TimeScale(TimeUnit.BIENNIUM, 1), "4y"),
    ],
)
def test_format_offset(offset: int, scale: TimeScale, label: str) -> None:
    """Test tick labels use a single unit suffix."""
    assert format_offset(offset, scale) == label


def test_labels_never_combine_units() -> None:
    """Test no label mixes units like 1y4m."""
    scale = choose_time_scale(4000)
    labels = [format_offset(o, scale) for o in tick_offsets(scale, 4000)]

    assert labels == ["0", "2y", "4y", "6y", "8y", "10y"]


def test_plan_relative_axis() -> None:
    """Test a relative axis spans the union of all repository days."""
    spans = [
        (date(2024, 1, 1), date(2024, 1, 31)),
        (date(2024, 4, 10), date(2024, 5, 20)),
    ]

    plan = plan_axis(spans, relative=True)

    assert plan.kind is AxisKind.RELATIVE
    assert plan.duration == 140
    assert plan.origin is None
    assert plan.scale == TimeScale(TimeUnit.MONTH, 1)
    assert plan.ticks[0].value == RelativeDay(0)
    assert [t.label for t in plan.ticks] == ["0", "1m", "2m", "3m", "4m"]


def test_plan_absolute_axis() -> None:
    """Test an absolute axis spans the union of calendar days."""
    spans = [
        (date(2024, 1, 1), date(2024, 1, 31)),
        (date(2024, 4, 10), date(2024, 5, 20)),
    ]

    plan = plan_axis(spans, relative=False)

    assert plan.kind is AxisKind.ABSOLUTE
    assert plan.origin == date(2024, 1, 1)
    assert plan.duration == 140
    assert plan.scale == TimeScale(TimeUnit.MONTH, 1)
    assert plan.ticks[0].value == AbsoluteDay(date(2024, 1, 1))
    assert plan.ticks[1].value == AbsoluteDay(date(2024, 2, 1))
    assert [t.label for t in plan.ticks] == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05"]


def test_plan_absolute_year_ticks_on_new_year() -> None:
    """Test multi-year absolute ticks fall on January 1st and are labelled by year."""
    start = date(2015, 3, 1)
    plan = plan_axis([(start, start + timedelta(days=1500))], relative=False)

    assert plan.scale == TimeScale(TimeUnit.YEAR, 1)
    assert [t.value for t in plan.ticks] == [AbsoluteDay(date(year, 1, 1)) for year in range(2016, 2020)]
    assert [t.label for t in plan.ticks] == ["2016", "2017", "2018", "2019"]


def test_plan_absolute_biennium_ticks() -> None:
    """Test decade-long absolute axes tick every other January 1st."""
    start = date(2014, 6, 1)
    plan = plan_axis([(start, start + timedelta(days=4000))], relative=False)

    assert plan.scale == TimeScale(TimeUnit.BIENNIUM, 1)
    assert [t.label for t in plan.ticks] == ["2015", "2017", "2019", "2021", "2023", "2025"]


def test_plan_absolute_day_ticks_step_from_origin() -> None:
    """Test short absolute axes tick weekly from the first day."""
    start = date(2024, 3, 5)
    plan = plan_axis([(start, start + timedelta(days=20))], relative=False)

    assert [t.label for t in plan.ticks] == ["2024-03-05", "2024-03-12", "2024-03-19"]


def test_plan_absolute_quarter_ticks() -> None:
    """Test quarter ticks fall on quarter starts."""
    start = date(2023, 2, 15)
    plan = plan_axis([(start, start + timedelta(days=400))], relative=False)

    assert plan.scale == TimeScale(TimeUnit.QUARTER, 1)
    assert [t.label for t in plan.ticks] == ["2023-04", "2023-07", "2023-10", "2024-01"]


def test_plan_requires_spans() -> None:
    """Test planning an axis for no repositories fails."""
    with pytest.raises(EmptyDataset):
        plan_axis([], relative=False)


def test_plan_rejects_reversed_span() -> None:
    """Test a span ending before it starts is rejected."""
    with pytest.raises(InvalidDuration):
        plan_axis([(date(2024, 2, 1), date(2024, 1, 1))], relative=True)
