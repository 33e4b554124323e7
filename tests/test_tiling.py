import math
import random

import pytest

from procgen import (
    InvalidInputError,
    Seed,
    SkewedTiledOctavedSimplexNoise,
    TiledOctavedSimplexNoise,
)


def test_source_dimension():
    assert TiledOctavedSimplexNoise(2, 3, 0.5, 1.0, 0.5).source.dim == 4
    assert SkewedTiledOctavedSimplexNoise(2, 3, 0.5, 1.0, 0.5).source.dim == 5
    assert TiledOctavedSimplexNoise(1, 3, 0.5, 1.0, 0.5).source.dim == 2


@pytest.mark.parametrize(
    "cls,dim,tile_distance",
    [
        (TiledOctavedSimplexNoise, 1, 2.5),
        (TiledOctavedSimplexNoise, 2, 1.0),
        (SkewedTiledOctavedSimplexNoise, 2, 1.0),
        (SkewedTiledOctavedSimplexNoise, 3, 0.75),
    ],
)
def test_periodic_along_each_axis(cls, dim, tile_distance):
    field = cls(dim, 4, 0.5, tile_distance, 0.5)
    seed = Seed.new(13, skew=0.3)
    rng = random.Random(dim)
    for _ in range(20):
        point = [rng.uniform(-3, 3) for _ in range(dim)]
        value = field.get_noise(seed, point)
        for axis in range(dim):
            for k in (-2, 1, 3):
                shifted = list(point)
                shifted[axis] += k * tile_distance
                assert abs(field.get_noise(seed, shifted) - value) < 1e-9


def test_skewed_field_drifts_smoothly_with_skew():
    field = SkewedTiledOctavedSimplexNoise(2, 4, 0.5, 1.0, 0.5)
    point = [0.21, 0.67]
    base = Seed.new(4, skew=1.0)
    value = field.get_noise(base, point)
    assert abs(field.get_noise(base.advance(1e-6), point) - value) < 1e-3
    rng = random.Random(1)
    far = [field.get_noise(base.with_skew(rng.uniform(2, 50)), point) for _ in range(10)]
    assert any(v != value for v in far)


def test_unskewed_field_ignores_skew():
    field = TiledOctavedSimplexNoise(2, 3, 0.5, 1.0, 0.5)
    point = [0.4, 0.1]
    assert field.get_noise(Seed.new(4, skew=0.0), point) == field.get_noise(Seed.new(4, skew=9.0), point)


def test_tiled_field_is_deterministic():
    a = SkewedTiledOctavedSimplexNoise(2, 5, 0.5, 1.0, 0.5)
    b = SkewedTiledOctavedSimplexNoise(2, 5, 0.5, 1.0, 0.5)
    seed = Seed.new(0, skew=0.5)
    for x in range(10):
        point = [x / 10.0, x / 7.0]
        assert a.get_noise(seed, point) == b.get_noise(seed, point)


@pytest.mark.parametrize("cls", [TiledOctavedSimplexNoise, SkewedTiledOctavedSimplexNoise])
def test_derivative_matches_finite_difference(cls):
    field = cls(2, 3, 0.5, 1.0, 0.5)
    seed = Seed.new(2, skew=0.1)
    rng = random.Random(2)
    h = 1e-6
    for _ in range(15):
        point = [rng.uniform(0, 1), rng.uniform(0, 1)]
        analytic = field.get_noise_derivative(seed, point)
        for axis in range(2):
            up = list(point)
            down = list(point)
            up[axis] += h
            down[axis] -= h
            numeric = (field.get_noise(seed, up) - field.get_noise(seed, down)) / (2 * h)
            assert analytic[axis] == pytest.approx(numeric, rel=1e-3, abs=1e-4)


@pytest.mark.parametrize(
    "tile_distance,scale",
    [(0.0, 0.5), (-1.0, 0.5), (1.0, 0.0), (1.0, -2.0), (math.nan, 0.5)],
)
def test_invalid_configuration_rejected(tile_distance, scale):
    with pytest.raises(InvalidInputError):
        TiledOctavedSimplexNoise(2, 3, 0.5, tile_distance, scale)


def test_point_dimension_checked_before_embedding():
    field = SkewedTiledOctavedSimplexNoise(2, 3, 0.5, 1.0, 0.5)
    with pytest.raises(InvalidInputError):
        field.get_noise(Seed.new(0), [0.1, 0.2, 0.3])
