"""Errors raised by the chart pipeline."""

from typing import Optional


class StarplotError(Exception):
    """Base class for pipeline errors.

    ``client_error`` tells a host whether the input was at fault (and the
    request should not be retried unchanged) or the pipeline itself is broken.
    """

    client_error = True


class EmptyDataset(StarplotError):
    """Nothing to chart: no repositories, or a repository without stars."""

    def __init__(self, repository: Optional[str] = None) -> None:
        self.repository = repository
        if repository:
            message = f"No star events recorded for {repository}"
        else:
            message = "At least one repository is required"
        super().__init__(message)


class TooManyRepositories(StarplotError):
    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(f"Requested {count} repositories, at most {limit} are allowed")


class RepositoryNotFound(StarplotError):
    def __init__(self, repository: str) -> None:
        self.repository = repository
        super().__init__(f"Repository {repository} not found")


class InvalidDuration(StarplotError):
    """A day range ended before it started."""

    client_error = False

    def __init__(self, duration: int) -> None:
        self.duration = duration
        super().__init__(f"Invalid day range duration: {duration}")


class RenderError(StarplotError):
    def __init__(self, field: str, value: object, reason: str = "must be positive") -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid chart {field}={value!r}: {reason}")
