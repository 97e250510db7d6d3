"""Tests for the chart pipeline service."""

from unittest.mock import Mock

import pytest

from starplot.errors import EmptyDataset, RepositoryNotFound, TooManyRepositories
from starplot.models import ChartConfig, ChartRequest, MetricKind, RepositoryRef
from starplot.service import ChartService, StarEventSource, build_chart

from conftest import make_events

ALPHA = RepositoryRef("octo", "alpha")
BETA = RepositoryRef("octo", "beta")


class FakeSource(StarEventSource):
    """In-memory star events keyed by owner/name."""

    def __init__(self, events: dict) -> None:
        self.events = events
        self.loaded = []

    def resolve(self, repository: RepositoryRef) -> str:
        if repository.full_name not in self.events:
            raise RepositoryNotFound(repository.full_name)
        return repository.full_name

    def star_events(self, repository_id: str) -> list:
        self.loaded.append(repository_id)
        return self.events[repository_id]


@pytest.fixture
def source() -> FakeSource:
    return FakeSource(
        {
            "octo/alpha": make_events("octo/alpha", [0, 0, 1, 3, 3, 3]),
            "octo/beta": make_events("octo/beta", [100, 101, 104]),
            "octo/empty": [],
        }
    )


def test_build_chart_response(source: FakeSource) -> None:
    """Test the pipeline returns a cacheable SVG."""
    request = ChartRequest(repositories=(ALPHA, BETA))
    events = {ALPHA: source.events["octo/alpha"], BETA: source.events["octo/beta"]}

    response = build_chart(request, events)

    assert response.content_type == "image/svg+xml"
    assert response.cache_control == "public, max-age=3600"
    assert b"octo/alpha, octo/beta: Position" in response.body


def test_pipeline_is_deterministic(source: FakeSource) -> None:
    """Test running the full pipeline twice gives byte-identical charts."""
    request = ChartRequest(
        repositories=(ALPHA, BETA),
        metric_types=(MetricKind.POSITION, MetricKind.SPEED, MetricKind.ACCELERATION),
        relative_x_axis=True,
    )
    service = ChartService(source)

    assert service.chart(request).body == service.chart(request).body


def test_chart_service_custom_cache_age(source: FakeSource) -> None:
    """Test the cache directive follows the configured max age."""
    service = ChartService(source, cache_max_age=600)

    response = service.chart(ChartRequest(repositories=(ALPHA,)))

    assert response.cache_control == "public, max-age=600"


def test_too_many_repositories_checked_before_loading(source: FakeSource) -> None:
    """Test an oversized request fails without touching storage."""
    repos = tuple(RepositoryRef("octo", f"repo{i}") for i in range(11))

    with pytest.raises(TooManyRepositories):
        ChartService(source).chart(ChartRequest(repositories=repos))

    assert source.loaded == []


def test_no_repositories(source: FakeSource) -> None:
    """Test a request naming no repositories is rejected."""
    with pytest.raises(EmptyDataset) as excinfo:
        ChartService(source).chart(ChartRequest(repositories=()))

    assert excinfo.value.repository is None


def test_repository_without_stars(source: FakeSource) -> None:
    """Test a repository with no star events is named in the error."""
    request = ChartRequest(repositories=(RepositoryRef("octo", "empty"),))

    with pytest.raises(EmptyDataset) as excinfo:
        ChartService(source).chart(request)

    assert excinfo.value.repository == "octo/empty"


def test_repository_not_found_propagates(source: FakeSource) -> None:
    """Test an unknown repository surfaces as not found."""
    request = ChartRequest(repositories=(ALPHA, RepositoryRef("octo", "missing")))

    with pytest.raises(RepositoryNotFound) as excinfo:
        ChartService(source).chart(request)

    assert excinfo.value.repository == "octo/missing"


def test_daily_counts_for_repository(source: FakeSource) -> None:
    """Test the per-day view is gap-filled."""
    counts = ChartService(source).daily(ALPHA)

    assert [c.new_stars for c in counts] == [2, 1, 0, 3]


def test_chart_config_is_used(source: FakeSource) -> None:
    """Test the request's chart config reaches the renderer."""
    request = ChartRequest(
        repositories=(ALPHA,),
        chart_config=ChartConfig(width=300, height=200, title="Alpha stars"),
    )

    body = ChartService(source).chart(request).body.decode("utf-8")

    assert 'viewBox="0 0 300 200"' in body
    assert "Alpha stars" in body


def test_source_interface_is_used() -> None:
    """Test the service resolves before loading events."""
    source = Mock(spec=StarEventSource)
    source.resolve.return_value = "id-1"
    source.star_events.return_value = make_events("id-1", [0, 2])

    ChartService(source).chart(ChartRequest(repositories=(ALPHA,)))

    source.resolve.assert_called_once_with(ALPHA)
    source.star_events.assert_called_once_with("id-1")
