"""
Pivot Chart Rendering
======================
Static PNG renderings of a PivotTable: a tiered heatmap and a bubble chart.
Cell colors come from presentation_buckets.color_tier/tier_color and bubble
sizes from bubble_radius, so the PNGs use the same buckets as any other
renderer of the same pivot.

Usage (from pivot_pipeline.py --charts):
    render_heatmap(pivot, out_dir / "heatmap_symptom.png", title="Symptoms")
    render_bubble_chart(pivot, out_dir / "bubble_symptom.png", title="Symptoms")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from matplotlib.colors import ListedColormap

from config import CHART_MAX_ROWS, DEFAULT_HEATMAP_THEME, HEATMAP_TIER_BANDS
from presentation_buckets import bubble_radius, color_tier, tier_color
from schemas import PivotTable

logger = logging.getLogger("hrsn_pivot")

# Presentation style
plt.rcParams.update({
    "figure.dpi": 150,
    "savefig.dpi": 150,
    "font.family": "sans-serif",
    "font.sans-serif": ["Helvetica Neue", "Arial", "DejaVu Sans"],
    "axes.titlesize": 14,
    "axes.labelsize": 12,
    "xtick.labelsize": 9,
    "ytick.labelsize": 9,
    "figure.facecolor": "white",
    "axes.facecolor": "white",
    "axes.edgecolor": "#333333",
})


def _head(pivot: PivotTable, max_rows: int) -> PivotTable:
    """First `max_rows` rows of a pivot (rows are already ranked)."""
    rows = pivot.rows[:max_rows]
    return PivotTable(columns=pivot.columns, rows=rows,
                      cells={row: pivot.cells[row] for row in rows})


def _count_matrix(pivot: PivotTable) -> np.ndarray:
    return np.array(
        [[pivot.cells[row][column] for column in pivot.columns] for row in pivot.rows],
        dtype=int,
    ).reshape(len(pivot.rows), len(pivot.columns))


def _figsize(pivot: PivotTable) -> tuple[float, float]:
    return (max(6.0, 1.5 + 0.45 * len(pivot.columns)),
            max(3.0, 1.0 + 0.3 * len(pivot.rows)))


def render_heatmap(
    pivot: PivotTable,
    path: Path,
    title: str = "",
    theme: str = DEFAULT_HEATMAP_THEME,
    bands: int = HEATMAP_TIER_BANDS,
    max_rows: int = CHART_MAX_ROWS,
) -> Optional[Path]:
    """
    Heatmap of value × date counts, colored by tier and annotated with counts.

    The running max is the largest cell among the drawn rows. An empty pivot
    draws nothing and returns None.
    """
    if pivot.is_empty():
        logger.info(f"No data for heatmap {path.name}, skipped")
        return None

    shown = _head(pivot, max_rows)
    counts = _count_matrix(shown)
    running_max = shown.max_value()
    tiers = np.vectorize(lambda v: color_tier(int(v), running_max, bands))(counts)
    cmap = ListedColormap([tier_color(t, theme, bands) for t in range(bands + 1)])

    fig, ax = plt.subplots(figsize=_figsize(shown))
    sns.heatmap(
        tiers, annot=counts, fmt="d", cmap=cmap, vmin=-0.5, vmax=bands + 0.5,
        xticklabels=shown.columns, yticklabels=shown.rows,
        linewidths=0.5, linecolor="white", cbar=False, ax=ax,
    )
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel("Date of service")

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
    return path


def render_bubble_chart(
    pivot: PivotTable,
    path: Path,
    title: str = "",
    theme: str = DEFAULT_HEATMAP_THEME,
    max_rows: int = CHART_MAX_ROWS,
) -> Optional[Path]:
    """Bubble per non-zero cell, sized by bubble_radius(). Empty pivot → None."""
    if pivot.is_empty():
        logger.info(f"No data for bubble chart {path.name}, skipped")
        return None

    shown = _head(pivot, max_rows)
    counts = _count_matrix(shown)
    ys, xs = np.nonzero(counts)
    radii = np.array([bubble_radius(int(counts[y, x])) for y, x in zip(ys, xs)])

    fig, ax = plt.subplots(figsize=_figsize(shown))
    # scatter sizes are marker areas in points²
    ax.scatter(xs, ys, s=radii ** 2, c=tier_color(HEATMAP_TIER_BANDS, theme),
               alpha=0.7, edgecolors="white", linewidth=0.5)
    ax.set_xticks(range(len(shown.columns)))
    ax.set_xticklabels(shown.columns, rotation=90)
    ax.set_yticks(range(len(shown.rows)))
    ax.set_yticklabels(shown.rows)
    ax.set_xlim(-0.5, len(shown.columns) - 0.5)
    ax.set_ylim(len(shown.rows) - 0.5, -0.5)
    ax.grid(alpha=0.3)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel("Date of service")

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
    return path
