"""Shared helpers for building star events."""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from starplot.models import StarEvent

START = date(2024, 1, 1)


def make_events(repository_id: str, day_offsets: list[int], start: date = START) -> list[StarEvent]:
    """One event per offset, each from a distinct stargazer, at noon UTC."""
    return [
        StarEvent(
            repository_id=repository_id,
            stargazer=f"{repository_id}-user{i}",
            starred_at=datetime.combine(start + timedelta(days=offset), time(12), tzinfo=timezone.utc),
        )
        for i, offset in enumerate(day_offsets)
    ]


@pytest.fixture
def scenario_events() -> list[StarEvent]:
    """Stars on relative days 0, 0, 1, 3, 3, 3."""
    return make_events("octo/alpha", [0, 0, 1, 3, 3, 3])
