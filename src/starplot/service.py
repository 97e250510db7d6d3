"""Run the chart pipeline for a request."""

import logging
from abc import ABC, abstractmethod
from typing import Mapping, Sequence

from starplot.aggregate import daily_counts
from starplot.errors import EmptyDataset
from starplot.metrics import compute_metrics
from starplot.models import (
    AxisKind,
    ChartRequest,
    ChartResponse,
    DailyCount,
    RepositoryRef,
    StarEvent,
)
from starplot.normalize import check_repository_count, normalize
from starplot.render import render_chart
from starplot.timescale import plan_axis

logger = logging.getLogger(__name__)

DEFAULT_CACHE_MAX_AGE = 3600


class StarEventSource(ABC):
    """Where star events for a repository come from."""

    @abstractmethod
    def resolve(self, repository: RepositoryRef) -> str:
        """Return the internal repository id, or raise RepositoryNotFound."""
        pass

    @abstractmethod
    def star_events(self, repository_id: str) -> list[StarEvent]:
        """Return every recorded star event for the repository."""
        pass


def cache_control(max_age: int) -> str:
    return f"public, max-age={max_age}"


def repository_daily_counts(
    repository: RepositoryRef, events: Sequence[StarEvent]
) -> list[DailyCount]:
    """Daily counts for one repository, naming it if it has no stars."""
    try:
        return daily_counts(events)
    except EmptyDataset as e:
        raise EmptyDataset(repository.full_name) from e


def build_chart(
    request: ChartRequest,
    events_by_repository: Mapping[RepositoryRef, Sequence[StarEvent]],
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE,
) -> ChartResponse:
    """Turn the star events of the requested repositories into an SVG chart."""
    check_repository_count(len(request.repositories))

    counts_by_repository = [
        (repository, repository_daily_counts(repository, events_by_repository.get(repository, [])))
        for repository in request.repositories
    ]

    series_by_repository = [
        (repository, compute_metrics(counts, request.metric_types))
        for repository, counts in counts_by_repository
    ]

    plan = plan_axis(
        [(counts[0].day, counts[-1].day) for _, counts in counts_by_repository],
        relative=request.relative_x_axis,
    )
    axis_kind = AxisKind.RELATIVE if request.relative_x_axis else AxisKind.ABSOLUTE
    bundle = normalize(series_by_repository, axis_kind)

    svg = render_chart(bundle, plan, request.chart_config)
    return ChartResponse(body=svg, cache_control=cache_control(cache_max_age))


class ChartService:
    """Load star events from a source and chart them."""

    def __init__(
        self, source: StarEventSource, cache_max_age: int = DEFAULT_CACHE_MAX_AGE
    ) -> None:
        self.source = source
        self.cache_max_age = cache_max_age

    def _load(self, repository: RepositoryRef) -> list[StarEvent]:
        repository_id = self.source.resolve(repository)
        events = self.source.star_events(repository_id)
        logger.info(f"Loaded {len(events)} star events for {repository}")
        return events

    def chart(self, request: ChartRequest) -> ChartResponse:
        # Fail on the repository count before touching storage
        check_repository_count(len(request.repositories))

        events_by_repository = {
            repository: self._load(repository) for repository in request.repositories
        }
        response = build_chart(request, events_by_repository, self.cache_max_age)
        logger.info(
            f"Charted {', '.join(r.full_name for r in request.repositories)} "
            f"({', '.join(k.value for k in request.metric_types)}, "
            f"{'relative' if request.relative_x_axis else 'absolute'} axis)"
        )
        return response

    def daily(self, repository: RepositoryRef) -> list[DailyCount]:
        """Gap-filled daily star counts for one repository."""
        return repository_daily_counts(repository, self._load(repository))
