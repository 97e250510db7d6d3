"""Choose the x axis and a clean tick interval from the charted day range."""

import logging
from datetime import date, timedelta
from typing import Sequence

import pandas as pd

from starplot.errors import EmptyDataset, InvalidDuration
from starplot.models import (
    AbsoluteDay,
    AxisKind,
    AxisPlan,
    RelativeDay,
    Tick,
    TimeScale,
    TimeUnit,
)

logger = logging.getLogger(__name__)

# (max duration in days, unit, step); first match wins
SCALE_THRESHOLDS = [
    (60, TimeUnit.DAY, 7),
    (365, TimeUnit.MONTH, 1),
    (1095, TimeUnit.QUARTER, 1),
    (3650, TimeUnit.YEAR, 1),
]
LONGEST_SCALE = TimeScale(TimeUnit.BIENNIUM, 1)

SUFFIXES = {
    TimeUnit.DAY: (1, "d"),
    TimeUnit.MONTH: (1, "m"),
    TimeUnit.QUARTER: (3, "m"),
    TimeUnit.YEAR: (1, "y"),
    TimeUnit.BIENNIUM: (2, "y"),
}


def _check_duration(duration: int) -> None:
    if duration < 0:
        logger.error(f"Negative day range duration {duration}")
        raise InvalidDuration(duration)


def choose_time_scale(duration: int) -> TimeScale:
    """Pick the tick unit and step for a range of ``duration`` days."""
    _check_duration(duration)
    for limit, unit, step in SCALE_THRESHOLDS:
        if duration <= limit:
            return TimeScale(unit, step)
    return LONGEST_SCALE


def tick_offsets(scale: TimeScale, duration: int) -> list[int]:
    """Day offsets of every tick from 0 up to and including ``duration``."""
    _check_duration(duration)
    return list(range(0, duration + 1, scale.interval_days))


def format_offset(offset: int, scale: TimeScale) -> str:
    """Label a tick offset in the scale's unit, e.g. ``7d``, ``3m``, ``2y``."""
    if offset == 0:
        return "0"
    multiple, suffix = SUFFIXES[scale.unit]
    return f"{offset // scale.unit.days * multiple}{suffix}"


# Calendar boundaries for absolute ticks; day ticks step from the origin
CALENDAR_FREQUENCIES = {
    TimeUnit.MONTH: ("MS", "%Y-%m"),
    TimeUnit.QUARTER: ("QS", "%Y-%m"),
    TimeUnit.YEAR: ("YS", "%Y"),
    TimeUnit.BIENNIUM: ("2YS", "%Y"),
}


def calendar_ticks(origin: date, duration: int, scale: TimeScale) -> list[Tick]:
    """Absolute ticks on clean calendar boundaries inside the range."""
    end = origin + timedelta(days=duration)
    if scale.unit is TimeUnit.DAY:
        freq, fmt = f"{scale.interval_days}D", "%Y-%m-%d"
    else:
        freq, fmt = CALENDAR_FREQUENCIES[scale.unit]
        if scale.step > 1:
            freq = f"{scale.step}{freq}"

    days = [ts.date() for ts in pd.date_range(start=origin, end=end, freq=freq)]
    if not days:
        days, fmt = [origin], "%Y-%m-%d"
    return [Tick(AbsoluteDay(day), day.strftime(fmt)) for day in days]


def plan_axis(spans: Sequence[tuple[date, date]], relative: bool) -> AxisPlan:
    """Plan the x axis for repositories observed over ``spans``.

    ``spans`` holds one ``(first_day, last_day)`` per repository. The
    duration is taken over the union of all days on both axis kinds.
    """
    if not spans:
        raise EmptyDataset()

    origin = min(first for first, _ in spans)
    duration = (max(last for _, last in spans) - origin).days
    scale = choose_time_scale(duration)

    if relative:
        ticks = tuple(
            Tick(RelativeDay(offset), format_offset(offset, scale))
            for offset in tick_offsets(scale, duration)
        )
        plan = AxisPlan(AxisKind.RELATIVE, scale, duration, None, ticks)
    else:
        ticks = tuple(calendar_ticks(origin, duration, scale))
        plan = AxisPlan(AxisKind.ABSOLUTE, scale, duration, origin, ticks)

    logger.debug(
        f"{plan.kind.value} axis over {duration} days: "
        f"{scale.unit.value} x{scale.step}, {len(plan.ticks)} ticks"
    )
    return plan
