from __future__ import annotations

"""Configuration dataclasses and tuning constants for noise and terrain generation."""

from dataclasses import dataclass, field

# Power applied to the per-vertex attenuation kernel. Empirical; changing it
# changes the look of every map.
ATTENUATION_EXPONENT = 4

# Extra output scale for simplex fields of 3+ dimensions. The closed-form
# scalar lets single-octave peaks reach about 1.16 there; this brings them
# back under 1.0 for the 3-5 dimensional fields terrain layers use.
HIGH_DIMENSION_NORMALIZATION = 0.8

# Skew added to the seed on every preview frame.
DEFAULT_SKEW_STEP = 0.005

# Latitude sinusoid vs. noise perturbance in the temperature blend.
TEMPERATURE_BASE_WEIGHT = 1.5
TEMPERATURE_PERTURBANCE_WEIGHT = 1.0

# Brightness range used when shading a tile's background by map texture.
TEXTURE_MIN_BRIGHTNESS = 0.3
TEXTURE_BRIGHTNESS_RANGE = 0.7


@dataclass(frozen=True)
class BiomeThresholds:
    """
    Fixed cut-offs used to classify (height, precipitation, temperature) into a biome.
    Loosely follows the Whittaker climate/biome diagram.
    """

    water_level: float = 0.55
    mountain_level: float = 0.7

    freezing: float = 0.225
    cold: float = 0.3
    temperate: float = 0.6

    arid: float = 0.45
    moist: float = 0.5
    wet: float = 0.6


@dataclass(frozen=True)
class NoiseLayerSettings:
    num_octaves: int = 5
    octave_factor: float = 0.5
    scale: float = 0.5
    # Feed the seed's skew into an extra noise dimension.
    skewed: bool = True


@dataclass
class TerrainSettings:
    tile_distance: float = 1.0
    dimension: int = 2
    heightmap: NoiseLayerSettings = field(
        default_factory=lambda: NoiseLayerSettings(num_octaves=20, octave_factor=0.5, scale=0.5)
    )
    moisturemap: NoiseLayerSettings = field(
        default_factory=lambda: NoiseLayerSettings(num_octaves=10, octave_factor=0.5, scale=0.5)
    )
    temperatureperturbancemap: NoiseLayerSettings = field(
        default_factory=lambda: NoiseLayerSettings(num_octaves=5, octave_factor=0.5, scale=1.0)
    )
    maptexturemap: NoiseLayerSettings = field(
        default_factory=lambda: NoiseLayerSettings(num_octaves=5, octave_factor=0.5, scale=0.5)
    )
    thresholds: BiomeThresholds = field(default_factory=BiomeThresholds)


__all__ = [
    "ATTENUATION_EXPONENT",
    "BiomeThresholds",
    "DEFAULT_SKEW_STEP",
    "NoiseLayerSettings",
    "TEMPERATURE_BASE_WEIGHT",
    "TEMPERATURE_PERTURBANCE_WEIGHT",
    "TEXTURE_BRIGHTNESS_RANGE",
    "TEXTURE_MIN_BRIGHTNESS",
    "TerrainSettings",
]
