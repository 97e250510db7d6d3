"""Value objects shared by every stage of the chart pipeline."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class RepositoryRef:
    """A repository as the caller names it."""

    owner: str
    name: str

    def __post_init__(self) -> None:
        if not self.owner or not self.name:
            raise ValueError("Repository owner and name cannot be empty")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str) -> "RepositoryRef":
        """Parse an ``owner/name`` string."""
        owner, sep, name = value.strip().partition("/")
        if not sep or "/" in name:
            raise ValueError(f"Expected owner/name, got {value!r}")
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class StarEvent:
    """One stargazer starring one repository."""

    repository_id: str
    stargazer: str
    starred_at: datetime


@dataclass(frozen=True)
class DailyCount:
    """New stars a repository gained on one UTC calendar day."""

    repository_id: str
    day: date
    new_stars: int

    def __post_init__(self) -> None:
        if self.new_stars < 0:
            raise ValueError("new_stars cannot be negative")


class MetricKind(str, Enum):
    """Which derivative of the star count to chart."""

    POSITION = "position"
    SPEED = "speed"
    ACCELERATION = "acceleration"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def axis_description(self) -> str:
        return {
            MetricKind.POSITION: "Total Stars",
            MetricKind.SPEED: "Daily Stars",
            MetricKind.ACCELERATION: "Star Acceleration",
        }[self]


class AxisKind(str, Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


@dataclass(frozen=True)
class AbsoluteDay:
    """An x value on a shared calendar axis."""

    day: date


@dataclass(frozen=True)
class RelativeDay:
    """An x value counted in days since a repository's first star."""

    offset: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("Relative offset cannot be negative")


AxisValue = Union[AbsoluteDay, RelativeDay]


@dataclass(frozen=True)
class DataPoint:
    x: AxisValue
    y: int


@dataclass(frozen=True)
class MetricSeries:
    """One metric for one repository.

    ``origin`` is the repository's first observed day, which anchors the
    relative axis even when the series itself starts later (acceleration).
    """

    repository_id: str
    kind: MetricKind
    origin: date
    points: tuple[DataPoint, ...]


class TimeUnit(str, Enum):
    """Tick granularity, with its nominal length in days."""

    DAY = "day"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    BIENNIUM = "biennium"

    @property
    def days(self) -> int:
        return {
            TimeUnit.DAY: 1,
            TimeUnit.MONTH: 30,
            TimeUnit.QUARTER: 90,
            TimeUnit.YEAR: 365,
            TimeUnit.BIENNIUM: 730,
        }[self]


@dataclass(frozen=True)
class TimeScale:
    unit: TimeUnit
    step: int

    def __post_init__(self) -> None:
        if self.step <= 0:
            raise ValueError("Time scale step must be positive")

    @property
    def interval_days(self) -> int:
        return self.unit.days * self.step


@dataclass(frozen=True)
class Tick:
    value: AxisValue
    label: str


@dataclass(frozen=True)
class AxisPlan:
    """The x axis chosen for a chart."""

    kind: AxisKind
    scale: TimeScale
    duration: int
    origin: Optional[date]
    ticks: tuple[Tick, ...]


@dataclass(frozen=True)
class ChartConfig:
    """Canvas and decoration settings for one chart."""

    width: int = 800
    height: int = 400
    title: Optional[str] = None
    show_legend: bool = True
    headroom: float = 1.1


@dataclass(frozen=True)
class ChartRequest:
    """What a caller asks to be charted."""

    repositories: tuple[RepositoryRef, ...]
    metric_types: tuple[MetricKind, ...] = (MetricKind.POSITION,)
    relative_x_axis: bool = False
    chart_config: ChartConfig = field(default_factory=ChartConfig)

    def __post_init__(self) -> None:
        # Accept lists from callers while keeping the request hashable.
        object.__setattr__(self, "repositories", tuple(self.repositories))
        object.__setattr__(self, "metric_types", tuple(dict.fromkeys(self.metric_types)))
        if not self.metric_types:
            raise ValueError("At least one metric type is required")


@dataclass(frozen=True)
class BundleSeries:
    repository: RepositoryRef
    kind: MetricKind
    points: tuple[DataPoint, ...]

    @property
    def label(self) -> str:
        return f"{self.repository.full_name} — {self.kind.label}"


@dataclass(frozen=True)
class ChartBundle:
    """All series of one chart, remapped onto one axis kind."""

    axis_kind: AxisKind
    series: tuple[BundleSeries, ...]

    @property
    def repositories(self) -> list[RepositoryRef]:
        return list(dict.fromkeys(s.repository for s in self.series))

    @property
    def metric_kinds(self) -> list[MetricKind]:
        return list(dict.fromkeys(s.kind for s in self.series))


@dataclass(frozen=True)
class ChartResponse:
    body: bytes
    cache_control: str
    content_type: str = "image/svg+xml"
