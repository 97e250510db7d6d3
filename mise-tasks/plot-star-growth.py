#!/usr/bin/env -S uv run

import logging
from pathlib import Path

from starplot import ChartRequest, ChartService, MetricKind
from starplot.config import get_settings
from starplot.metrics import daily_growth_rate
from starplot.normalize import MAX_REPOSITORIES
from starplot.storage import CsvStarEventSource

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

settings = get_settings()

# Read the star events CSV
source = CsvStarEventSource(settings.events_csv)
service = ChartService(source, settings.cache_max_age)

# Rank repos by current star count, keep the top 10
totals = {}
for repo in source.repositories():
    counts = service.daily(repo)
    totals[repo] = (sum(c.new_stars for c in counts), daily_growth_rate(counts))
repos = sorted(totals, key=lambda r: (-totals[r][0], r.full_name))[:MAX_REPOSITORIES]

if len(repos) == 0:
    print(f"No star events in {settings.events_csv}")
    exit(0)

settings.output_dir.mkdir(parents=True, exist_ok=True)

charts = [
    ('star_growth.svg', [MetricKind.POSITION], False, 'GitHub Stars Over Time'),
    ('star_growth_relative.svg', [MetricKind.POSITION], True, 'GitHub Stars Since First Star'),
    ('star_speed_relative.svg', [MetricKind.SPEED], True, 'Daily New Stars Since First Star'),
]

for filename, metrics, relative, title in charts:
    request = ChartRequest(
        repositories=tuple(repos),
        metric_types=tuple(metrics),
        relative_x_axis=relative,
        chart_config=settings.chart_config(title),
    )
    path = Path(settings.output_dir) / filename
    path.write_bytes(service.chart(request).body)
    print(f"Saved visualization to {path}")

print(f"Tracking {len(repos)} repos")
for repo in repos:
    stars, rate = totals[repo]
    print(f"  {repo}: {stars:,} stars (+{rate:.1f}/day)")
