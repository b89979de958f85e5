"""
Trend plots for tag history.

Draws the recent history of one or more tags with matplotlib and
marks the times at which alarms were raised.
"""

from pathlib import Path
from typing import Iterable
import logging

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .tag_provider import TagRegistry
from .tags import AlarmSeverity, is_number


logger = logging.getLogger(__name__)

ALARM_COLORS = {
    AlarmSeverity.LOW: 'orange',
    AlarmSeverity.HIGH: 'red',
    AlarmSeverity.CRITICAL: 'darkred',
}


def plot_tag_history(
    registry: TagRegistry,
    names: Iterable[str],
    output_path: Path,
    limit: int = 100,
) -> Path:
    """
    Generate and save a trend chart of tag history.

    Only numeric history values are plotted. Time is shown in seconds
    relative to the earliest plotted entry.

    Args:
        registry: Registry holding the tags
        names: Tag names to plot, one line each
        output_path: Path to save the image
        limit: Max history entries per tag

    Raises:
        ValueError: none of the tags has numeric history
    """
    output_path = Path(output_path)
    series = {}
    for name in names:
        points = [
            (entry.timestamp, float(entry.value))
            for entry in registry.get_history(name, limit)
            if is_number(entry.value)
        ]
        if points:
            series[name] = points
        else:
            logger.warning(f"No numeric history for {name}, skipping")

    if not series:
        raise ValueError("No numeric history to plot")

    t0 = min(points[0][0] for points in series.values())

    fig, ax = plt.subplots(figsize=(10, 5))
    for name, points in series.items():
        ts, values = zip(*points)
        ax.step([t - t0 for t in ts], values, where='post', label=name, linewidth=1.5)

        tag = registry.get_tag(name)
        if tag is not None and tag.min is not None:
            ax.axhline(tag.min, color='gray', linestyle=':', linewidth=0.8)
        if tag is not None and tag.max is not None:
            ax.axhline(tag.max, color='gray', linestyle=':', linewidth=0.8)

        for alarm in registry.get_alarms(name):
            ax.axvline(alarm.timestamp - t0, color=ALARM_COLORS[alarm.severity],
                       linestyle='--', linewidth=0.8, alpha=0.7)

    ax.set_xlabel('Time [s]')
    ax.set_ylabel('Value')
    ax.set_title(f"Tag history: {output_path.stem}")
    ax.legend(loc='best', fontsize=8)
    ax.grid(True, alpha=0.3)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close(fig)

    return output_path
