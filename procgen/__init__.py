from __future__ import annotations

from .errors import InvalidInputError
from .noise import (
    Noise,
    NoiseDerivative,
    OctavedSimplexNoise,
    SimplexNoise,
    SkewedTiledOctavedSimplexNoise,
    TiledOctavedSimplexNoise,
)
from .seed import Seed, stable_hash
from .settings import (
    ATTENUATION_EXPONENT,
    BiomeThresholds,
    DEFAULT_SKEW_STEP,
    NoiseLayerSettings,
    TerrainSettings,
)
from .terrain import (
    BIOME_COLORS,
    BIOME_GLYPHS,
    Biome,
    Terrain,
    TerrainSample,
    TiledWorldTerrain,
    classify_biome,
    color_brightness,
    color_lerp,
    get_glyph,
    render_colors,
)

__all__ = [
    "ATTENUATION_EXPONENT",
    "BIOME_COLORS",
    "BIOME_GLYPHS",
    "Biome",
    "BiomeThresholds",
    "DEFAULT_SKEW_STEP",
    "InvalidInputError",
    "Noise",
    "NoiseDerivative",
    "NoiseLayerSettings",
    "OctavedSimplexNoise",
    "Seed",
    "SimplexNoise",
    "SkewedTiledOctavedSimplexNoise",
    "Terrain",
    "TerrainSample",
    "TerrainSettings",
    "TiledOctavedSimplexNoise",
    "TiledWorldTerrain",
    "classify_biome",
    "color_brightness",
    "color_lerp",
    "get_glyph",
    "render_colors",
    "stable_hash",
]
