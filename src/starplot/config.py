"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from starplot.models import ChartConfig


@dataclass
class ChartDefaults:
    """Chart canvas settings."""
    width: int = 800
    height: int = 400
    show_legend: bool = True
    headroom: float = 1.1


@dataclass
class PathsConfig:
    """Path settings."""
    events_csv: Path = Path("stars.csv")
    output_dir: Path = Path("charts")


@dataclass
class CacheConfig:
    """Response caching settings."""
    max_age: int = 3600


@dataclass
class Settings:
    """Application settings."""

    chart: ChartDefaults = field(default_factory=ChartDefaults)
    paths: PathsConfig = field(default_factory=PathsConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    @property
    def events_csv(self) -> Path:
        return self.paths.events_csv

    @property
    def output_dir(self) -> Path:
        return self.paths.output_dir

    @property
    def cache_max_age(self) -> int:
        return self.cache.max_age

    def chart_config(self, title: Optional[str] = None) -> ChartConfig:
        return ChartConfig(
            width=self.chart.width,
            height=self.chart.height,
            title=title,
            show_legend=self.chart.show_legend,
            headroom=self.chart.headroom,
        )


def load_config(config_path: Path = Path("starplot.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("starplot.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)
    settings = Settings()

    if "chart" in config:
        for key, value in config["chart"].items():
            setattr(settings.chart, key, value)

    if "paths" in config:
        for key, value in config["paths"].items():
            setattr(settings.paths, key, Path(value))

    if "cache" in config:
        for key, value in config["cache"].items():
            setattr(settings.cache, key, value)

    events_csv = os.getenv("STARPLOT_EVENTS_CSV")
    if events_csv:
        settings.paths.events_csv = Path(events_csv)

    return settings
