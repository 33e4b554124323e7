import random

import pytest

from procgen import (
    BIOME_COLORS,
    Biome,
    InvalidInputError,
    Noise,
    NoiseLayerSettings,
    Seed,
    TerrainSettings,
    TiledWorldTerrain,
    color_brightness,
    color_lerp,
    render_colors,
)
from procgen.terrain import WATER_DEEP, WATER_SHALLOW


class ConstantNoise(Noise):
    """Noise stub returning the same raw value everywhere."""

    def __init__(self, value, dim=2):
        self.value = value
        self.dim = dim

    def get_noise(self, seed, point):
        return self.value


def make_stub_terrain(height=0.0, moisture=0.0, perturbance=0.0, texture=0.0):
    return TiledWorldTerrain(
        heightmap=ConstantNoise(height),
        moisturemap=ConstantNoise(moisture),
        temperatureperturbancemap=ConstantNoise(perturbance),
        maptexturemap=ConstantNoise(texture),
    )


def small_settings():
    layer = NoiseLayerSettings(num_octaves=3, octave_factor=0.5, scale=0.5)
    return TerrainSettings(
        heightmap=layer,
        moisturemap=layer,
        temperatureperturbancemap=NoiseLayerSettings(num_octaves=2, octave_factor=0.5, scale=1.0),
        maptexturemap=layer,
    )


def test_forced_cold_lowland_is_ice():
    # raw -0.4 -> height 0.3; latitude sine is -1 at y=0.5, so perturbance -0.5 -> temperature 0.1
    terrain = make_stub_terrain(height=-0.4, perturbance=-0.5)
    seed = Seed.new(0)
    point = [0.0, 0.5]
    assert terrain.get_height(seed, point) == pytest.approx(0.3)
    assert terrain.get_temperature(seed, point) == pytest.approx(0.1)
    assert terrain.get_biome(seed, point) is Biome.ICE


@pytest.mark.parametrize("moisture", [-1.0, 0.0, 1.0])
@pytest.mark.parametrize("perturbance", [-1.0, 0.0, 1.0])
def test_forced_highland_is_mountain(moisture, perturbance):
    terrain = make_stub_terrain(height=0.8, moisture=moisture, perturbance=perturbance)
    seed = Seed.new(0)
    for point in ([0.0, 0.0], [0.3, 0.5], [0.9, 0.75]):
        assert terrain.get_height(seed, point) == pytest.approx(0.9)
        assert terrain.get_biome(seed, point) is Biome.MOUNTAIN


def test_temperature_follows_latitude():
    terrain = make_stub_terrain()
    seed = Seed.new(0)
    # sine peaks at y=0 and bottoms out at y=0.5
    assert terrain.get_temperature(seed, [0.0, 0.0]) == pytest.approx(0.8)
    assert terrain.get_temperature(seed, [0.0, 0.5]) == pytest.approx(0.2)


def test_outputs_clamped_to_unit_range():
    terrain = make_stub_terrain(height=5.0, moisture=-5.0, perturbance=10.0, texture=3.0)
    seed = Seed.new(0)
    assert terrain.get_height(seed, [0.1, 0.1]) == 1.0
    assert terrain.get_precipitation(seed, [0.1, 0.1]) == 0.0
    assert terrain.get_temperature(seed, [0.1, 0.1]) == 1.0
    assert terrain.get_map_texture(seed, [0.1, 0.1]) == 1.0


def test_water_color_darkens_with_depth_and_texture():
    # height 0.275 -> (0.275 / 0.55) ** 3 == 0.125; texture 0 -> brightness 0.3
    terrain = make_stub_terrain(height=-0.45, texture=-1.0)
    seed = Seed.new(0)
    point = [0.0, 0.0]
    assert terrain.get_biome(seed, point) is Biome.WATER
    foreground, background = terrain.render(seed, point)
    expected = color_lerp(WATER_DEEP, WATER_SHALLOW, 0.125)
    assert foreground == pytest.approx(expected)
    assert background == pytest.approx(color_brightness(expected, 0.3))


def test_land_background_uses_texture_brightness():
    fg, bg = render_colors(Biome.DESERT, 0.6, 0.5)
    assert fg == BIOME_COLORS[Biome.DESERT]
    assert bg == pytest.approx(tuple(c * 0.65 for c in BIOME_COLORS[Biome.DESERT]))
    fg, bg = render_colors(Biome.MOUNTAIN, 0.9, 1.0)
    assert bg == pytest.approx(fg)


def test_color_helpers():
    assert color_lerp((0.0, 0.0, 0.0), (1.0, 0.5, 0.2), 0.5) == pytest.approx((0.5, 0.25, 0.1))
    assert color_brightness((1.0, 1.0, 1.0), 0.0) == (0.0, 0.0, 0.0)
    assert set(BIOME_COLORS) == set(Biome)


def test_real_terrain_values_in_range_and_deterministic():
    terrain = TiledWorldTerrain(small_settings())
    seed = Seed.new(1234, skew=0.2)
    rng = random.Random(0)
    for _ in range(40):
        point = [rng.uniform(-1, 1), rng.uniform(-1, 1)]
        sample = terrain.sample(seed, point)
        for value in (sample.height, sample.precipitation, sample.temperature, sample.texture):
            assert 0.0 <= value <= 1.0
        assert isinstance(sample.biome, Biome)
        assert sample.biome is terrain.get_biome(seed, point)
        assert sample.colors == terrain.render(seed, point)
        for color in sample.colors:
            assert all(0.0 <= c <= 1.0 for c in color)
        assert terrain.sample(seed, point) == sample


def test_real_terrain_tiles():
    terrain = TiledWorldTerrain(small_settings())
    seed = Seed.new(5)
    for point in ([0.13, 0.42], [0.77, 0.05]):
        shifted = [point[0] + 1.0, point[1] - 2.0]
        assert terrain.get_height(seed, shifted) == pytest.approx(terrain.get_height(seed, point), abs=1e-9)
        assert terrain.get_biome(seed, shifted) is terrain.get_biome(seed, point)


def test_layers_are_independent():
    terrain = TiledWorldTerrain(small_settings())
    seed = Seed.new(9)
    point = [0.31, 0.62]
    values = {
        terrain.get_height(seed, point),
        terrain.get_precipitation(seed, point),
        terrain.get_map_texture(seed, point),
    }
    assert len(values) == 3


def test_default_terrain_builds_original_layers():
    terrain = TiledWorldTerrain()
    assert len(terrain.heightmap.source) == 20
    assert len(terrain.moisturemap.source) == 10
    assert len(terrain.temperatureperturbancemap.source) == 5
    assert terrain.temperatureperturbancemap.scale == 1.0
    assert terrain.maptexturemap.source.dim == 5
    sample = terrain.sample(Seed.new(0), [0.25, 0.25])
    assert 0.0 <= sample.height <= 1.0


def test_point_dimension_mismatch_rejected():
    terrain = make_stub_terrain()
    with pytest.raises(InvalidInputError):
        terrain.get_height(Seed.new(0), [0.1])
    with pytest.raises(InvalidInputError):
        terrain.render(Seed.new(0), [0.1, 0.2, 0.3])


def test_one_dimensional_terrain_rejected():
    with pytest.raises(InvalidInputError):
        TiledWorldTerrain(TerrainSettings(dimension=1))


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_non_finite_layer_value_rejected(bad):
    seed = Seed.new(0)
    point = [0.2, 0.3]
    with pytest.raises(InvalidInputError):
        make_stub_terrain(height=bad).get_height(seed, point)
    with pytest.raises(InvalidInputError):
        make_stub_terrain(perturbance=bad).get_temperature(seed, point)
    with pytest.raises(InvalidInputError):
        make_stub_terrain(moisture=bad).get_biome(seed, point)
