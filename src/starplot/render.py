"""Draw a normalized chart bundle as an SVG image."""

import logging
import threading
from io import BytesIO

import matplotlib
import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_hex
from matplotlib.dates import date2num
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter, MaxNLocator

from starplot.errors import RenderError
from starplot.models import (
    AbsoluteDay,
    AxisKind,
    AxisPlan,
    AxisValue,
    ChartBundle,
    ChartConfig,
)

logger = logging.getLogger(__name__)

# SVG user units per inch, so the canvas is exactly width x height
DPI = 72

PALETTE = [to_hex(color) for color in colormaps["tab10"](np.linspace(0, 1, 10))]
LINESTYLES = ["-", "--", ":"]

# A fixed salt makes matplotlib's generated SVG ids reproducible
SVG_RC = {"svg.hashsalt": "starplot", "svg.fonttype": "none"}

# rcParams are process-global; saving holds them for the whole render
_render_lock = threading.Lock()


def series_style(index: int) -> tuple[str, str]:
    """Colour and line style for the series at ``index`` in a bundle."""
    color = PALETTE[index % len(PALETTE)]
    linestyle = LINESTYLES[(index // len(PALETTE)) % len(LINESTYLES)]
    return color, linestyle


def _trim(value: float) -> str:
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_count(value: float) -> str:
    """Compact star counts: 950, 1.5K, 12K, 2.3M."""
    # Thresholds apply to the rounded value: 999_950 is 1M, not 1000K
    if abs(round(value / 1_000, 1)) >= 1_000:
        return f"{_trim(value / 1_000_000)}M"
    if abs(round(value, 1)) >= 1_000:
        return f"{_trim(value / 1_000)}K"
    return _trim(value)


def x_position(value: AxisValue) -> float:
    if isinstance(value, AbsoluteDay):
        return float(date2num(np.datetime64(value.day, "D")))
    return float(value.offset)


def auto_title(bundle: ChartBundle) -> str:
    names = ", ".join(repo.full_name for repo in bundle.repositories)
    kinds = ", ".join(kind.label for kind in bundle.metric_kinds)
    return f"{names}: {kinds}"


def y_bounds(bundle: ChartBundle, headroom: float) -> tuple[float, float]:
    values = [point.y for series in bundle.series for point in series.points]
    low = min(values, default=0)
    high = max(values, default=0)
    bottom = low * headroom if low < 0 else 0.0
    top = high * headroom if high > 0 else 1.0
    return bottom, top


def _check_geometry(config: ChartConfig) -> None:
    if config.width <= 0:
        raise RenderError("width", config.width)
    if config.height <= 0:
        raise RenderError("height", config.height)
    if config.headroom < 1.0:
        raise RenderError("headroom", config.headroom, "must be at least 1.0")


def _new_figure(config: ChartConfig) -> Figure:
    return Figure(figsize=(config.width / DPI, config.height / DPI), dpi=DPI)


def _save(fig: Figure) -> bytes:
    buffer = BytesIO()
    try:
        fig.savefig(buffer, format="svg", metadata={"Date": None})
    except ValueError as e:
        raise RenderError("figure", fig.get_size_inches().tolist(), str(e)) from e
    return buffer.getvalue()


def _draw_x_axis(ax, plan: AxisPlan) -> None:
    start = x_position(AbsoluteDay(plan.origin)) if plan.origin else 0.0
    end = start + plan.duration
    if plan.duration == 0:
        ax.set_xlim(start - 0.5, end + 0.5)
    else:
        ax.set_xlim(start, end)

    ax.set_xticks(
        [x_position(tick.value) for tick in plan.ticks],
        [tick.label for tick in plan.ticks],
        rotation=45,
        ha="right",
    )
    if plan.kind is AxisKind.RELATIVE:
        ax.set_xlabel("Days Since First Star", fontsize=10)
    else:
        ax.set_xlabel("Date", fontsize=10)


def _draw_y_axis(ax, bundle: ChartBundle, headroom: float) -> None:
    ax.set_ylim(*y_bounds(bundle, headroom))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=6, integer=True))
    ax.yaxis.set_major_formatter(FuncFormatter(lambda value, _: format_count(value)))

    kinds = bundle.metric_kinds
    ylabel = kinds[0].axis_description if len(kinds) == 1 else "Stars"
    ax.set_ylabel(ylabel, fontsize=10)


def render_chart(bundle: ChartBundle, plan: AxisPlan, config: ChartConfig) -> bytes:
    """Render one line per series in ``bundle``.

    Identical inputs give byte-identical SVG output.
    """
    _check_geometry(config)

    with _render_lock, matplotlib.rc_context(SVG_RC):
        fig = _new_figure(config)
        ax = fig.subplots()

        for index, series in enumerate(bundle.series):
            color, linestyle = series_style(index)
            ax.plot(
                [x_position(point.x) for point in series.points],
                [point.y for point in series.points],
                color=color,
                linestyle=linestyle,
                linewidth=2,
                label=series.label,
            )

        _draw_x_axis(ax, plan)
        _draw_y_axis(ax, bundle, config.headroom)
        ax.set_title(config.title or auto_title(bundle), fontsize=12, fontweight="bold")
        ax.grid(True, alpha=0.3)

        if config.show_legend:
            ax.legend(loc="upper left", fontsize=8)

        fig.tight_layout()
        svg = _save(fig)

    logger.debug(
        f"Rendered {len(bundle.series)} series at {config.width}x{config.height} "
        f"({len(svg)} bytes)"
    )
    return svg


def render_placeholder(message: str, config: ChartConfig) -> bytes:
    """A chart with no data, only ``message`` in the middle."""
    _check_geometry(config)

    with _render_lock, matplotlib.rc_context(SVG_RC):
        fig = _new_figure(config)
        ax = fig.subplots()
        ax.text(0.5, 0.5, message,
                horizontalalignment="center", verticalalignment="center",
                transform=ax.transAxes, fontsize=14, color="gray")
        ax.set_xticks([])
        ax.set_yticks([])
        if config.title:
            ax.set_title(config.title, fontsize=12, fontweight="bold")
        return _save(fig)
