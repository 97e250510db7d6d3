"""Star growth charts for GitHub repositories."""

from starplot.aggregate import daily_counts
from starplot.errors import (
    EmptyDataset,
    InvalidDuration,
    RenderError,
    RepositoryNotFound,
    StarplotError,
    TooManyRepositories,
)
from starplot.metrics import compute_metric, compute_metrics
from starplot.models import (
    ChartConfig,
    ChartRequest,
    ChartResponse,
    MetricKind,
    RepositoryRef,
    StarEvent,
)
from starplot.normalize import normalize
from starplot.render import render_chart
from starplot.service import ChartService, StarEventSource, build_chart
from starplot.timescale import choose_time_scale, plan_axis

__version__ = "0.1.0"

__all__ = [
    "ChartConfig",
    "ChartRequest",
    "ChartResponse",
    "ChartService",
    "EmptyDataset",
    "InvalidDuration",
    "MetricKind",
    "RenderError",
    "RepositoryNotFound",
    "RepositoryRef",
    "StarEvent",
    "StarEventSource",
    "StarplotError",
    "TooManyRepositories",
    "build_chart",
    "choose_time_scale",
    "compute_metric",
    "compute_metrics",
    "daily_counts",
    "normalize",
    "plan_axis",
    "render_chart",
]
