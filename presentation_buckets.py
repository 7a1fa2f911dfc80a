"""
Presentation Bucketing
=======================
Deterministic value → tier and value → radius mappings for chart renderers.
Both are monotonic: a bigger count never gets a lighter color or a smaller
bubble. Renderers call these per cell with values already in a PivotTable
(use PivotTable.max_value() as the running max).
"""

from __future__ import annotations

import math

from config import (
    BUBBLE_RADIUS_STEPS, DEFAULT_HEATMAP_THEME, EMPTY_TIER, HEATMAP_THEMES,
    HEATMAP_TIER_BANDS, HEATMAP_TIER_BANDS_RANGE,
)


def color_tier(value: int, running_max: int, bands: int = HEATMAP_TIER_BANDS) -> int:
    """
    Heatmap tier for a cell value.

    0 is always EMPTY_TIER. When the running max fits inside the band count,
    every integer gets its own tier (1 → 1, 2 → 2, …). Past that, tiers are
    equal proportional slices of the running max, rounded up, so the max
    itself always lands in the top band.

    Args:
        value: cell count (non-negative)
        running_max: largest count on the chart; a smaller value than
            `value` is treated as `value`
        bands: number of non-empty tiers (6-8)
    """
    low, high = HEATMAP_TIER_BANDS_RANGE
    if not low <= bands <= high:
        raise ValueError(f"bands must be between {low} and {high}, got {bands}")
    if value <= 0:
        return EMPTY_TIER

    running_max = max(running_max, value)
    if running_max <= bands:
        return min(value, bands)
    return max(1, min(bands, math.ceil(value * bands / running_max)))


def tier_color(tier: int, theme: str = DEFAULT_HEATMAP_THEME,
               bands: int = HEATMAP_TIER_BANDS) -> str:
    """Hex color for a tier in one of the configured HEATMAP_THEMES.

    Themes list 8 shades; with fewer bands the shades are spread so tier 1
    is the lightest and the top tier the darkest.
    """
    palette = HEATMAP_THEMES[theme]
    if tier == EMPTY_TIER:
        return palette["empty"]
    shades = palette["bands"]
    tier = max(1, min(tier, bands))
    if bands == 1:
        return shades[-1]
    index = round((tier - 1) * (len(shades) - 1) / (bands - 1))
    return shades[index]


def bubble_radius(value) -> int:
    """
    Pixel radius for a bubble/scatter point.

    Fixed steps: 0 → 0 (not drawn), 1 → 5px, then +2px per step up to 23px
    at 10 and above. Values are rounded first; negatives count as 0.
    """
    steps = max(0, round(value))
    return BUBBLE_RADIUS_STEPS[min(steps, len(BUBBLE_RADIUS_STEPS) - 1)]
