"""Position, speed and acceleration series from daily star counts."""

import logging
from typing import Iterable, Sequence

import pandas as pd
from scipy import stats

from starplot.errors import EmptyDataset
from starplot.models import AbsoluteDay, DailyCount, DataPoint, MetricKind, MetricSeries

logger = logging.getLogger(__name__)


def _daily_series(counts: Sequence[DailyCount]) -> pd.Series:
    if not counts:
        raise EmptyDataset()
    return pd.Series(
        [count.new_stars for count in counts],
        index=[count.day for count in counts],
        dtype="int64",
    )


def compute_metric(counts: Sequence[DailyCount], kind: MetricKind) -> MetricSeries:
    """Derive one metric series from gap-filled daily counts.

    Acceleration has no value for the first day, so it is one point shorter
    than position and speed.
    """
    new_stars = _daily_series(counts)

    if kind is MetricKind.POSITION:
        values = new_stars.cumsum()
    elif kind is MetricKind.SPEED:
        values = new_stars
    elif kind is MetricKind.ACCELERATION:
        values = new_stars.diff().iloc[1:]
    else:
        raise ValueError(f"Unknown metric kind: {kind}")

    points = tuple(
        DataPoint(x=AbsoluteDay(day), y=int(value)) for day, value in values.items()
    )
    return MetricSeries(
        repository_id=counts[0].repository_id,
        kind=kind,
        origin=counts[0].day,
        points=points,
    )


def compute_metrics(
    counts: Sequence[DailyCount], kinds: Iterable[MetricKind]
) -> list[MetricSeries]:
    """Compute each requested metric over the same day index."""
    series = [compute_metric(counts, kind) for kind in kinds]
    logger.debug(
        f"{counts[0].repository_id}: computed "
        + ", ".join(f"{s.kind.value}={len(s.points)}" for s in series)
    )
    return series


def daily_growth_rate(
    counts: Sequence[DailyCount], windows: Sequence[int] = (30, 90, 180)
) -> float:
    """Average stars per day using 30/90/180 day trailing windows.

    Each window that fits in the data contributes the least-squares slope of
    the cumulative star count; windows longer than the data are skipped.
    """
    if len(counts) < 2:
        return 0.0

    total = _daily_series(counts).cumsum()
    total_days = len(total) - 1

    daily_gains = []
    for days in windows:
        if days > total_days:
            continue
        recent = total.iloc[-(days + 1):]
        slope, _, _, _, _ = stats.linregress(range(len(recent)), recent.to_numpy())
        daily_gains.append(slope)

    if not daily_gains:
        # Shorter than every window: use the whole history
        slope, _, _, _, _ = stats.linregress(range(len(total)), total.to_numpy())
        return float(slope)
    return float(sum(daily_gains) / len(daily_gains))
