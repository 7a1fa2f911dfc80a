import pytest

from config import BUBBLE_RADIUS_STEPS, EMPTY_TIER, HEATMAP_THEMES
from presentation_buckets import bubble_radius, color_tier, tier_color


def test_zero_is_empty_tier():
    assert color_tier(0, 0) == EMPTY_TIER
    assert color_tier(0, 500) == EMPTY_TIER


def test_small_range_gives_each_integer_its_own_tier():
    assert [color_tier(v, 5) for v in range(6)] == [0, 1, 2, 3, 4, 5]


def test_large_range_uses_proportional_bands():
    assert color_tier(1, 100) == 1
    assert color_tier(50, 100) == 3
    assert color_tier(100, 100) == 6
    assert color_tier(100, 100, bands=8) == 8


@pytest.mark.parametrize("running_max", [1, 5, 6, 7, 13, 100, 2500])
@pytest.mark.parametrize("bands", [6, 7, 8])
def test_tier_is_monotonic_and_bounded(running_max, bands):
    tiers = [color_tier(v, running_max, bands) for v in range(running_max + 1)]
    assert tiers == sorted(tiers)
    assert all(0 <= t <= bands for t in tiers)
    assert all(t >= 1 for t in tiers[1:])


def test_value_above_running_max_lands_in_top_band():
    assert color_tier(40, 10) == 6


@pytest.mark.parametrize("bands", [5, 9])
def test_band_count_outside_range_rejected(bands):
    with pytest.raises(ValueError):
        color_tier(1, 10, bands=bands)


def test_tier_colors_go_light_to_dark():
    palette = HEATMAP_THEMES["grayscale"]
    assert tier_color(EMPTY_TIER, "grayscale") == palette["empty"]
    assert tier_color(1, "grayscale") == palette["bands"][0]
    assert tier_color(6, "grayscale") == palette["bands"][-1]
    assert tier_color(8, "grayscale", bands=8) == palette["bands"][7]
    colors = [tier_color(t, "grayscale") for t in range(1, 7)]
    assert len(set(colors)) == 6


def test_unknown_theme():
    with pytest.raises(KeyError):
        tier_color(1, "neon")


def test_radius_steps():
    assert bubble_radius(0) == 0
    assert bubble_radius(1) == 5
    assert bubble_radius(2) == 7
    assert bubble_radius(10) == 23
    assert bubble_radius(11) == 23
    assert bubble_radius(10_000) == 23


def test_radius_is_monotonic():
    radii = [bubble_radius(v) for v in range(30)]
    assert radii == sorted(radii)
    # Strictly larger until the ceiling
    assert all(a < b for a, b in zip(radii[:10], radii[1:11]))
    assert max(radii) == BUBBLE_RADIUS_STEPS[-1]


def test_radius_handles_floats_and_negatives():
    assert bubble_radius(-3) == 0
    assert bubble_radius(2.4) == 7
