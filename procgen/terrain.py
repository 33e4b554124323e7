from __future__ import annotations

"""
terrain.py

Combines four independently seeded tiled noise fields into height,
precipitation, temperature and texture, classifies each point into a
``Biome`` and maps it to a foreground/background color pair.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import InvalidInputError
from .noise import (
    Noise,
    Point,
    SkewedTiledOctavedSimplexNoise,
    TiledOctavedSimplexNoise,
    _as_point,
)
from .seed import Seed
from .settings import (
    BiomeThresholds,
    NoiseLayerSettings,
    TEMPERATURE_BASE_WEIGHT,
    TEMPERATURE_PERTURBANCE_WEIGHT,
    TEXTURE_BRIGHTNESS_RANGE,
    TEXTURE_MIN_BRIGHTNESS,
    TerrainSettings,
)

logger = logging.getLogger("procgen.Terrain")
logger.addHandler(logging.NullHandler())

# RGB with channels in [0, 1]
Color = Tuple[float, float, float]


class Biome(Enum):
    EMPTY = "empty"
    WATER = "water"
    ICE = "ice"
    TUNDRA = "tundra"
    BOREAL_FOREST = "boreal_forest"
    SHRUBLAND = "shrubland"
    TEMPERATE_GRASSLAND = "temperate_grassland"
    TEMPERATE_RAINFOREST = "temperate_rainforest"
    TEMPERATE_SEASONAL_FOREST = "temperate_seasonal_forest"
    TROPICAL_RAINFOREST = "tropical_rainforest"
    TROPICAL_SEASONAL_FOREST = "tropical_seasonal_forest"
    SAVANNAH = "savannah"
    DESERT = "desert"
    MOUNTAIN = "mountain"


# ─────────────────────────────────────────────────────────────────────────────
# == COLORS & GLYPHS ==

WATER_DEEP: Color = (0.0, 0.08, 0.3)
WATER_SHALLOW: Color = (0.15, 0.45, 0.85)

BIOME_COLORS: Dict[Biome, Color] = {
    Biome.EMPTY: (0.0, 0.0, 0.0),
    Biome.WATER: WATER_SHALLOW,
    Biome.ICE: (0.9, 0.95, 1.0),
    Biome.TUNDRA: (0.74, 0.76, 0.7),
    Biome.BOREAL_FOREST: (0.2, 0.4, 0.3),
    Biome.SHRUBLAND: (0.56, 0.6, 0.36),
    Biome.TEMPERATE_GRASSLAND: (0.55, 0.75, 0.35),
    Biome.TEMPERATE_RAINFOREST: (0.1, 0.45, 0.25),
    Biome.TEMPERATE_SEASONAL_FOREST: (0.25, 0.55, 0.2),
    Biome.TROPICAL_RAINFOREST: (0.0, 0.4, 0.1),
    Biome.TROPICAL_SEASONAL_FOREST: (0.35, 0.55, 0.1),
    Biome.SAVANNAH: (0.76, 0.7, 0.36),
    Biome.DESERT: (0.9, 0.8, 0.55),
    Biome.MOUNTAIN: (0.5, 0.48, 0.45),
}

BIOME_GLYPHS: Dict[Biome, str] = {
    Biome.EMPTY: " ",
    Biome.WATER: "~",
    Biome.ICE: "=",
    Biome.TUNDRA: ".",
    Biome.BOREAL_FOREST: "T",
    Biome.SHRUBLAND: '"',
    Biome.TEMPERATE_GRASSLAND: ",",
    Biome.TEMPERATE_RAINFOREST: "Y",
    Biome.TEMPERATE_SEASONAL_FOREST: "t",
    Biome.TROPICAL_RAINFOREST: "&",
    Biome.TROPICAL_SEASONAL_FOREST: "f",
    Biome.SAVANNAH: ";",
    Biome.DESERT: ":",
    Biome.MOUNTAIN: "^",
}


def color_lerp(color_a: Color, color_b: Color, lerp: float) -> Color:
    """Per-channel linear blend from ``color_a`` (lerp=0) to ``color_b`` (lerp=1)."""
    return tuple(a + (b - a) * lerp for a, b in zip(color_a, color_b))  # type: ignore[return-value]


def color_brightness(color: Color, brightness: float) -> Color:
    """Darken ``color`` toward black; brightness 1.0 leaves it unchanged."""
    return color_lerp((0.0, 0.0, 0.0), color, brightness)


def water_color(height: float, water_level: float) -> Color:
    """Deep blue at the sea floor, brightening cubically toward the shoreline."""
    return color_lerp(WATER_DEEP, WATER_SHALLOW, (height / water_level) ** 3)


def get_glyph(biome: Biome) -> str:
    return BIOME_GLYPHS[biome]


# ─────────────────────────────────────────────────────────────────────────────
# == CLASSIFICATION ==

def classify_biome(
    height: float,
    precipitation: float,
    temperature: float,
    thresholds: Optional[BiomeThresholds] = None,
) -> Biome:
    """
    Classify a point from its height, precipitation and temperature.
    Fudged from the Whittaker biome diagram. Order of checks:
      1. Below water level -> ice when freezing, else water
      2. Below mountain level -> temperature band, then precipitation band
      3. Otherwise -> mountain
    """
    th = thresholds or BiomeThresholds()

    if height < th.water_level:
        if temperature < th.freezing:
            return Biome.ICE
        return Biome.WATER

    if height < th.mountain_level:
        if temperature < th.freezing:
            return Biome.TUNDRA
        if temperature < th.cold:
            if precipitation < th.arid:
                return Biome.TEMPERATE_GRASSLAND
            if precipitation < th.moist:
                return Biome.SHRUBLAND
            return Biome.BOREAL_FOREST
        if temperature < th.temperate:
            if precipitation < th.arid:
                return Biome.TEMPERATE_GRASSLAND
            if precipitation < th.moist:
                return Biome.SHRUBLAND
            if precipitation < th.wet:
                return Biome.TEMPERATE_SEASONAL_FOREST
            return Biome.TEMPERATE_RAINFOREST
        if precipitation < th.arid:
            return Biome.DESERT
        if precipitation < th.moist:
            return Biome.SAVANNAH
        if precipitation < th.wet:
            return Biome.TROPICAL_SEASONAL_FOREST
        return Biome.TROPICAL_RAINFOREST

    return Biome.MOUNTAIN


def render_colors(
    biome: Biome,
    height: float,
    texture: float,
    thresholds: Optional[BiomeThresholds] = None,
) -> Tuple[Color, Color]:
    """Foreground (base) and texture-shaded background color for one tile."""
    th = thresholds or BiomeThresholds()
    if biome is Biome.WATER:
        base = water_color(height, th.water_level)
    else:
        base = BIOME_COLORS[biome]
    background = color_brightness(base, TEXTURE_MIN_BRIGHTNESS + TEXTURE_BRIGHTNESS_RANGE * texture)
    return base, background


# ─────────────────────────────────────────────────────────────────────────────
# == TERRAIN ==

@dataclass(frozen=True)
class TerrainSample:
    """Every value computed for a single terrain query."""

    height: float
    precipitation: float
    temperature: float
    texture: float
    biome: Biome
    foreground: Color
    background: Color

    @property
    def glyph(self) -> str:
        return BIOME_GLYPHS[self.biome]

    @property
    def colors(self) -> Tuple[Color, Color]:
        return self.foreground, self.background


class Terrain(ABC):
    """
    Height, precipitation, temperature and texture fields over the same points.

    Subclasses provide the four fields; classification and coloring are shared.
    """

    @property
    def thresholds(self) -> BiomeThresholds:
        return BiomeThresholds()

    @abstractmethod
    def get_height(self, seed: Seed, point: Point) -> float: ...

    @abstractmethod
    def get_precipitation(self, seed: Seed, point: Point) -> float: ...

    @abstractmethod
    def get_temperature(self, seed: Seed, point: Point) -> float: ...

    @abstractmethod
    def get_map_texture(self, seed: Seed, point: Point) -> float: ...

    def get_biome(self, seed: Seed, point: Point) -> Biome:
        return classify_biome(
            self.get_height(seed, point),
            self.get_precipitation(seed, point),
            self.get_temperature(seed, point),
            self.thresholds,
        )

    def render(self, seed: Seed, point: Point) -> Tuple[Color, Color]:
        """(foreground, background) colors for ``point``."""
        return self.sample(seed, point).colors

    def sample(self, seed: Seed, point: Point) -> TerrainSample:
        """Evaluate every field once and return the full record for ``point``."""
        height = self.get_height(seed, point)
        precipitation = self.get_precipitation(seed, point)
        temperature = self.get_temperature(seed, point)
        texture = self.get_map_texture(seed, point)
        biome = classify_biome(height, precipitation, temperature, self.thresholds)
        foreground, background = render_colors(biome, height, texture, self.thresholds)
        return TerrainSample(
            height=height,
            precipitation=precipitation,
            temperature=temperature,
            texture=texture,
            biome=biome,
            foreground=foreground,
            background=background,
        )


def _unit(value: float) -> float:
    if not math.isfinite(value):
        raise InvalidInputError(f"Noise layer produced a non-finite value: {value}")
    return max(0.0, min(1.0, value))


def _build_layer(dim: int, tile_distance: float, layer: NoiseLayerSettings) -> Noise:
    cls = SkewedTiledOctavedSimplexNoise if layer.skewed else TiledOctavedSimplexNoise
    return cls(dim, layer.num_octaves, layer.octave_factor, tile_distance, layer.scale)


class TiledWorldTerrain(Terrain):
    """
    Terrain whose every field tiles over ``settings.tile_distance``.

    Each of the four noise fields can be swapped for any ``Noise`` object of the
    same dimension, e.g. a constant stub in tests.
    """

    def __init__(
        self,
        settings: Optional[TerrainSettings] = None,
        *,
        heightmap: Optional[Noise] = None,
        moisturemap: Optional[Noise] = None,
        temperatureperturbancemap: Optional[Noise] = None,
        maptexturemap: Optional[Noise] = None,
    ) -> None:
        self.settings: TerrainSettings = settings if settings is not None else TerrainSettings()
        if self.settings.dimension < 2:
            raise InvalidInputError(
                f"Terrain needs at least 2 dimensions for latitude, got {self.settings.dimension}"
            )

        self.heightmap = self._layer(heightmap, self.settings.heightmap)
        self.moisturemap = self._layer(moisturemap, self.settings.moisturemap)
        self.temperatureperturbancemap = self._layer(
            temperatureperturbancemap, self.settings.temperatureperturbancemap
        )
        self.maptexturemap = self._layer(maptexturemap, self.settings.maptexturemap)
        logger.debug(
            "TiledWorldTerrain ready (dim=%d, tile_distance=%s)",
            self.settings.dimension,
            self.settings.tile_distance,
        )

    def _layer(self, override: Optional[Noise], layer: NoiseLayerSettings) -> Noise:
        if override is not None:
            return override
        return _build_layer(self.settings.dimension, self.settings.tile_distance, layer)

    @property
    def thresholds(self) -> BiomeThresholds:
        return self.settings.thresholds

    def _point(self, point: Point) -> List[float]:
        return _as_point(point, self.settings.dimension)

    def get_height(self, seed: Seed, point: Point) -> float:
        p = self._point(point)
        return _unit(self.heightmap.get_noise(seed.derive("heightmap"), p) / 2.0 + 0.5)

    def get_precipitation(self, seed: Seed, point: Point) -> float:
        p = self._point(point)
        return _unit(self.moisturemap.get_noise(seed.derive("moisturemap"), p) / 2.0 + 0.5)

    def get_temperature(self, seed: Seed, point: Point) -> float:
        """Latitude sinusoid along axis 1 blended with a noise perturbance."""
        p = self._point(point)
        base = math.sin((p[1] + 0.25) * 2.0 * math.pi)
        perturbance = self.temperatureperturbancemap.get_noise(
            seed.derive("temperatureperturbancemap"), p
        )
        blended = (base * TEMPERATURE_BASE_WEIGHT + perturbance * TEMPERATURE_PERTURBANCE_WEIGHT) / (
            TEMPERATURE_BASE_WEIGHT + TEMPERATURE_PERTURBANCE_WEIGHT
        )
        return _unit(blended / 2.0 + 0.5)

    def get_map_texture(self, seed: Seed, point: Point) -> float:
        p = self._point(point)
        return _unit(self.maptexturemap.get_noise(seed.derive("maptexturemap"), p) / 2.0 + 0.5)


__all__ = [
    "BIOME_COLORS",
    "BIOME_GLYPHS",
    "Biome",
    "Color",
    "Terrain",
    "TerrainSample",
    "TiledWorldTerrain",
    "WATER_DEEP",
    "WATER_SHALLOW",
    "classify_biome",
    "color_brightness",
    "color_lerp",
    "get_glyph",
    "render_colors",
    "water_color",
]
