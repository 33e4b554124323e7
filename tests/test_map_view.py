import pytest

from procgen import Biome, TerrainSample
from ui.map_view import (
    hex_corners,
    hex_distance,
    hex_range,
    hex_to_pixel,
    point_for_pixel,
    tile_color,
    to_rgba,
)


def make_sample():
    return TerrainSample(
        height=0.5,
        precipitation=0.25,
        temperature=1.0,
        texture=0.0,
        biome=Biome.WATER,
        foreground=(0.0, 0.0, 1.0),
        background=(0.0, 0.0, 0.3),
    )


def test_hex_range_covers_patch_nearest_first():
    assert list(hex_range(0)) == [(0, 0)]
    for radius in (1, 2, 5):
        cells = list(hex_range(radius))
        assert len(cells) == 3 * radius * (radius + 1) + 1
        assert len(set(cells)) == len(cells)
        distances = [hex_distance(q, r) for q, r in cells]
        assert distances == sorted(distances)
        assert max(distances) == radius


def test_hex_geometry():
    assert hex_to_pixel(0, 0) == (0.0, 0.0)
    x, y = hex_to_pixel(2, 0, size=10)
    assert x == pytest.approx(30.0)
    corners = hex_corners(0.0, 0.0, size=10)
    assert len(corners) == 6
    assert corners[0] == pytest.approx((10.0, 0.0))


def test_pixel_to_terrain_point():
    assert point_for_pixel(400.0, -300.0, (800, 600)) == [0.5, -0.5]
    assert point_for_pixel(10.9, 0.0, (100, 100)) == [0.1, 0.0]


def test_colors_converted_to_rgba():
    assert to_rgba((1.0, 0.0, 0.2)) == (255, 0, 51, 255)
    assert to_rgba((2.0, -1.0, 0.0)) == (255, 0, 0, 255)


def test_tile_color_per_layer():
    sample = make_sample()
    assert tile_color(sample, "biome") == to_rgba(sample.background)
    assert tile_color(sample, "height") == (127, 127, 127, 255)
    assert tile_color(sample, "temperature") == (255, 255, 255, 255)
    assert tile_color(sample, "precipitation") == (63, 63, 63, 255)
