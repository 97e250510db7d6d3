"""CLI entry point for starplot."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer

from starplot.aggregate import daily_counts_frame
from starplot.config import get_settings
from starplot.errors import EmptyDataset, StarplotError
from starplot.metrics import daily_growth_rate
from starplot.models import ChartRequest, MetricKind, RepositoryRef
from starplot.render import render_placeholder
from starplot.service import ChartService
from starplot.storage import CsvStarEventSource

logger = logging.getLogger(__name__)

app = typer.Typer(help="Chart GitHub star growth from recorded star events.", no_args_is_help=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _parse_repositories(values: List[str]) -> list[RepositoryRef]:
    try:
        return [RepositoryRef.parse(value) for value in values]
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _default_output(
    output_dir: Path, repositories: list[RepositoryRef], metrics: list[MetricKind], relative: bool
) -> Path:
    stem = "-".join(f"{r.owner}_{r.name}" for r in repositories)
    stem += "_" + "-".join(m.value for m in metrics)
    if relative:
        stem += "_relative"
    return output_dir / f"{stem}.svg"


def _open_source(csv_path: Path) -> CsvStarEventSource:
    try:
        return CsvStarEventSource(csv_path)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: cannot read star events: {e}", err=True)
        raise typer.Exit(code=2) from e


def _fail(error: StarplotError) -> None:
    if error.client_error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=2)
    logger.error(f"Chart generation failed: {error}", exc_info=True)
    raise typer.Exit(code=1)


@app.command()
def chart(
    repositories: List[str] = typer.Argument(..., help="Repositories as owner/name"),
    metric: Optional[List[MetricKind]] = typer.Option(
        None, "--metric", "-m", help="Metric to plot (repeatable, default: position)"
    ),
    relative: bool = typer.Option(False, "--relative", help="Align repositories at their first star"),
    title: Optional[str] = typer.Option(None, help="Chart title"),
    width: Optional[int] = typer.Option(None, help="Canvas width"),
    height: Optional[int] = typer.Option(None, help="Canvas height"),
    no_legend: bool = typer.Option(False, "--no-legend", help="Hide the legend"),
    events: Optional[Path] = typer.Option(None, help="CSV of star events"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Where to write the SVG"),
    config: Path = typer.Option(Path("starplot.yaml"), help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Render a star growth chart for one or more repositories."""
    _setup_logging(verbose)
    settings = get_settings(config)

    refs = _parse_repositories(repositories)
    metrics = list(metric) if metric else [MetricKind.POSITION]

    chart_config = settings.chart_config(title)
    chart_config = replace(
        chart_config,
        width=chart_config.width if width is None else width,
        height=chart_config.height if height is None else height,
        show_legend=chart_config.show_legend and not no_legend,
    )

    if output is None:
        output = _default_output(settings.output_dir, refs, metrics, relative)
    output.parent.mkdir(parents=True, exist_ok=True)

    service = ChartService(_open_source(events or settings.events_csv), settings.cache_max_age)
    request = ChartRequest(
        repositories=tuple(refs),
        metric_types=tuple(metrics),
        relative_x_axis=relative,
        chart_config=chart_config,
    )

    try:
        response = service.chart(request)
    except EmptyDataset as e:
        if not e.repository:
            _fail(e)
        output.write_bytes(render_placeholder(f"No star data available for {e.repository}", chart_config))
        typer.echo(f"No star data for {e.repository}; wrote placeholder to {output}", err=True)
        raise typer.Exit(code=1)
    except StarplotError as e:
        _fail(e)

    output.write_bytes(response.body)
    typer.echo(f"Saved visualization to {output}")

    for ref in refs:
        counts = service.daily(ref)
        total = sum(count.new_stars for count in counts)
        typer.echo(f"  {ref}: {total:,} stars (+{daily_growth_rate(counts):.1f}/day)")


@app.command()
def daily(
    repository: str = typer.Argument(..., help="Repository as owner/name"),
    events: Optional[Path] = typer.Option(None, help="CSV of star events"),
    config: Path = typer.Option(Path("starplot.yaml"), help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print new and total stars for every day since the first star."""
    _setup_logging(verbose)
    settings = get_settings(config)
    ref = _parse_repositories([repository])[0]

    service = ChartService(_open_source(events or settings.events_csv), settings.cache_max_age)
    try:
        counts = service.daily(ref)
    except StarplotError as e:
        _fail(e)

    typer.echo(daily_counts_frame(counts).to_string(index=False))


if __name__ == "__main__":
    app()
