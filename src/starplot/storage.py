"""Star events stored in a CSV file."""

import logging
from pathlib import Path

import pandas as pd

from starplot.errors import RepositoryNotFound
from starplot.models import RepositoryRef, StarEvent
from starplot.service import StarEventSource

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["owner", "name", "stargazer", "starred_at"]


class CsvStarEventSource(StarEventSource):
    """Read ``owner,name,stargazer,starred_at`` rows, one per star."""

    def __init__(self, csv_path: Path) -> None:
        self.csv_path = Path(csv_path)
        self._df = self._load(self.csv_path)

    @staticmethod
    def _load(csv_path: Path) -> pd.DataFrame:
        df = pd.read_csv(csv_path, dtype={"owner": str, "name": str, "stargazer": str})

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"{csv_path} is missing required columns: {', '.join(missing)}")

        df["starred_at"] = pd.to_datetime(df["starred_at"], utc=True, errors="coerce")
        dropped = int(df["starred_at"].isna().sum())
        if dropped:
            logger.warning(f"Skipping {dropped} rows with unreadable starred_at in {csv_path}")
        df = df.dropna(subset=["owner", "name", "stargazer", "starred_at"])

        df["repository_id"] = df["owner"] + "/" + df["name"]
        logger.debug(f"Read {len(df)} star events from {csv_path}")
        return df

    def repositories(self) -> list[RepositoryRef]:
        pairs = self._df[["owner", "name"]].drop_duplicates().sort_values(["owner", "name"])
        return [RepositoryRef(owner, name) for owner, name in pairs.itertuples(index=False)]

    def resolve(self, repository: RepositoryRef) -> str:
        if not (self._df["repository_id"] == repository.full_name).any():
            raise RepositoryNotFound(repository.full_name)
        return repository.full_name

    def star_events(self, repository_id: str) -> list[StarEvent]:
        rows = self._df[self._df["repository_id"] == repository_id]
        return [
            StarEvent(
                repository_id=repository_id,
                stargazer=row.stargazer,
                starred_at=row.starred_at.to_pydatetime(),
            )
            for row in rows.itertuples(index=False)
        ]
