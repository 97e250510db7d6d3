"""Align several repositories' metric series onto one chart axis."""

import logging
from typing import Sequence

from starplot.errors import EmptyDataset, TooManyRepositories
from starplot.models import (
    AbsoluteDay,
    AxisKind,
    BundleSeries,
    ChartBundle,
    DataPoint,
    MetricSeries,
    RelativeDay,
    RepositoryRef,
)

logger = logging.getLogger(__name__)

MAX_REPOSITORIES = 10


def check_repository_count(count: int) -> None:
    if count < 1:
        raise EmptyDataset()
    if count > MAX_REPOSITORIES:
        raise TooManyRepositories(count, MAX_REPOSITORIES)


def _to_relative(series: MetricSeries) -> tuple[DataPoint, ...]:
    points = []
    for point in series.points:
        if isinstance(point.x, RelativeDay):
            points.append(point)
            continue
        offset = (point.x.day - series.origin).days
        points.append(DataPoint(x=RelativeDay(offset), y=point.y))
    return tuple(points)


def _to_absolute(series: MetricSeries) -> tuple[DataPoint, ...]:
    for point in series.points:
        if not isinstance(point.x, AbsoluteDay):
            raise ValueError(
                f"{series.repository_id} {series.kind.value} has no calendar days"
            )
    return series.points


def normalize(
    series_by_repository: Sequence[tuple[RepositoryRef, Sequence[MetricSeries]]],
    axis_kind: AxisKind,
) -> ChartBundle:
    """Bundle every repository's series for one chart.

    Points are never resampled: each series keeps exactly the points it was
    computed with. On a relative axis each repository's own first day maps to
    offset 0.
    """
    check_repository_count(len(series_by_repository))

    remap = _to_relative if axis_kind is AxisKind.RELATIVE else _to_absolute
    bundle = []
    for repository, metric_series in series_by_repository:
        for series in metric_series:
            bundle.append(BundleSeries(repository, series.kind, remap(series)))

    logger.debug(
        f"Bundled {len(bundle)} series for {len(series_by_repository)} repositories "
        f"on a {axis_kind.value} axis"
    )
    return ChartBundle(axis_kind=axis_kind, series=tuple(bundle))
