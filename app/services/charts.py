"""
Charts Service - PNG charts for the site detail and fleet activity views
Uses matplotlib + seaborn for server-side PNG generation
"""

import matplotlib
matplotlib.use('Agg')  # Headless mode - must be before pyplot import

import matplotlib.pyplot as plt
import matplotlib.dates as mdates
import seaborn as sns
from io import BytesIO
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from app.schemas import DashboardRow, SiteDetailRow, SiteStatus, ThresholdRange
from app.services.lookup import sort_by_slug

# Set seaborn style
sns.set_theme(style="whitegrid", palette="husl")

STATUS_COLORS = {
    SiteStatus.ok: '#22c55e',
    SiteStatus.warn: '#eab308',
    SiteStatus.stale: '#ef4444',
}

PRESSURE_COLOR = '#3b82f6'
LEVEL_COLOR = '#8b5cf6'
LIMIT_COLOR = '#f97316'

NAN = float('nan')


def _resolve_tz(timezone: str) -> ZoneInfo:
    try:
        return ZoneInfo(timezone)
    except Exception:
        return ZoneInfo("UTC")


def _draw_limits(ax, low: Optional[float], high: Optional[float]) -> None:
    """Dashed lines at whichever bounds are configured."""
    if low is not None:
        ax.axhline(y=low, color=LIMIT_COLOR, linestyle='--', alpha=0.7, linewidth=1, label=f'low {low:g}')
    if high is not None:
        ax.axhline(y=high, color=LIMIT_COLOR, linestyle='--', alpha=0.7, linewidth=1, label=f'high {high:g}')


def generate_site_chart(
    rows: Sequence[SiteDetailRow],
    site_label: str,
    limits: Optional[ThresholdRange] = None,
    timezone: str = "Asia/Seoul",
) -> BytesIO:
    """
    He pressure and He level time series for one site.

    Args:
        rows: Detail rows, newest first (as returned by the detail service)
        site_label: Title text
        limits: ctrl range to draw, if any
        timezone: Display timezone for the time axis

    Returns:
        BytesIO buffer with PNG image
    """
    dated = [r for r in reversed(rows) if r.date is not None]
    if not dated:
        return _generate_empty_chart("No data to display")

    tz = _resolve_tz(timezone)
    times = [r.date.astimezone(tz) for r in dated]
    pressure = [NAN if r.hepres is None else r.hepres for r in dated]
    level = [NAN if r.heleve is None else r.heleve for r in dated]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)
    fig.suptitle(f'{site_label} - last {len(dated)} readings', fontsize=14, fontweight='bold')

    ax1.plot(times, pressure, color=PRESSURE_COLOR, linewidth=2, marker='o', markersize=3)
    ax1.set_ylabel('He Pressure (psi)', fontsize=11)

    ax2.plot(times, level, color=LEVEL_COLOR, linewidth=2, marker='o', markersize=3)
    ax2.fill_between(times, level, alpha=0.15, color=LEVEL_COLOR)
    ax2.set_ylabel('He Level (%)', fontsize=11)

    if limits is not None:
        _draw_limits(ax1, limits.mrplel, limits.mrpleh)
        _draw_limits(ax2, limits.mrlevl, limits.mrlevh)
        for ax in (ax1, ax2):
            if ax.get_legend_handles_labels()[0]:
                ax.legend(loc='upper right', fontsize=9)

    ax2.xaxis.set_major_formatter(mdates.DateFormatter('%H:%M', tz=tz))
    plt.setp(ax2.xaxis.get_majorticklabels(), rotation=45, ha='right')

    plt.tight_layout(rect=[0, 0, 1, 0.97])

    return _to_png(fig)


def generate_activity_chart(rows: Sequence[DashboardRow]) -> BytesIO:
    """
    Records received in the last 24 hours, one bar per site.
    Bars are colored by site status and ordered by slug.
    """
    if not rows:
        return _generate_empty_chart("No sites")

    ordered = sort_by_slug(rows, lambda r: r.site_slug)
    labels = [r.site_slug for r in ordered]
    counts = [r.count_24h for r in ordered]
    colors = [STATUS_COLORS[r.status] for r in ordered]

    fig, ax = plt.subplots(figsize=(max(8, len(ordered) * 0.4), 5))
    ax.bar(range(len(ordered)), counts, color=colors, alpha=0.85)

    ax.set_ylabel('Records (24h)')
    ax.set_title('Records per site - last 24 hours', fontsize=14, fontweight='bold')
    ax.set_xticks(range(len(ordered)))
    ax.set_xticklabels(labels, rotation=90 if len(ordered) > 30 else 0)

    plt.tight_layout()

    return _to_png(fig)


def _to_png(fig, dpi: int = 150) -> BytesIO:
    buf = BytesIO()
    fig.savefig(buf, format='png', dpi=dpi, bbox_inches='tight',
                facecolor='white', edgecolor='none')
    buf.seek(0)
    plt.close(fig)

    return buf


def _generate_empty_chart(message: str) -> BytesIO:
    """Generate a simple chart with 'no data' message."""
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.text(0.5, 0.5, message, ha='center', va='center', fontsize=14, color='gray')
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.axis('off')

    return _to_png(fig, dpi=100)
