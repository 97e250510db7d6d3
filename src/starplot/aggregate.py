"""Fold raw star events into one gap-free count per calendar day."""

import logging
from typing import Iterable

import pandas as pd

from starplot.errors import EmptyDataset
from starplot.models import DailyCount, StarEvent

logger = logging.getLogger(__name__)


def _event_days(events: Iterable[StarEvent]) -> tuple[str, pd.Series]:
    events = list(events)
    if not events:
        raise EmptyDataset()

    repository_ids = {event.repository_id for event in events}
    if len(repository_ids) > 1:
        raise ValueError(f"Events from several repositories: {sorted(repository_ids)}")
    repository_id = repository_ids.pop()

    df = pd.DataFrame(
        {
            "stargazer": [event.stargazer for event in events],
            "starred_at": [event.starred_at for event in events],
        }
    )
    # Naive timestamps are UTC; aware ones are converted to UTC first
    df["starred_at"] = pd.to_datetime(df["starred_at"], utc=True)
    df = df.sort_values(["starred_at", "stargazer"], kind="mergesort")

    before = len(df)
    df = df.drop_duplicates(subset="stargazer", keep="first")
    if len(df) < before:
        logger.debug(
            f"Dropped {before - len(df)} repeated stargazers for {repository_id}"
        )

    days = df["starred_at"].dt.tz_localize(None).dt.normalize()
    return repository_id, days


def daily_counts(events: Iterable[StarEvent]) -> list[DailyCount]:
    """Count new stars per UTC day from the first to the last starred day.

    Every day in the range is present; days without stars count zero.
    """
    repository_id, days = _event_days(events)

    counts = days.value_counts().sort_index()
    full_range = pd.date_range(start=counts.index.min(), end=counts.index.max(), freq="D")
    counts = counts.reindex(full_range, fill_value=0)

    logger.debug(
        f"{repository_id}: {int(counts.sum())} stars over {len(counts)} days"
    )
    return [
        DailyCount(repository_id=repository_id, day=day.date(), new_stars=int(n))
        for day, n in counts.items()
    ]


def daily_counts_frame(counts: list[DailyCount]) -> pd.DataFrame:
    """Tabular view of daily counts with a running total."""
    df = pd.DataFrame(
        {
            "date": [count.day for count in counts],
            "new_stars": [count.new_stars for count in counts],
        }
    )
    df["total_stars"] = df["new_stars"].cumsum()
    return df
