from __future__ import annotations

"""
noise.py

N-dimensional simplex noise with an analytic gradient, plus the fractal and
tiling wrappers built on top of it.

- ``SimplexNoise``: a single octave on the skewed simplex lattice.
- ``OctavedSimplexNoise``: weighted sum of independently seeded octaves.
- ``TiledOctavedSimplexNoise``: embeds each axis on a circle so the field is
  periodic over ``tile_distance``.
- ``SkewedTiledOctavedSimplexNoise``: as above, with the seed's skew fed in as
  one extra unwrapped dimension.

Every field is a pure function of (seed, point). Only the constant tables built
in ``__init__`` are stored, so a constructed field may be shared between threads.
"""

import logging
import math
import sys
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from .errors import InvalidInputError
from .seed import Seed
from .settings import ATTENUATION_EXPONENT, HIGH_DIMENSION_NORMALIZATION

logger = logging.getLogger("procgen.Noise")
logger.addHandler(logging.NullHandler())

# Type aliases
Point = Sequence[float]
Gradient = Tuple[float, ...]


# ─────────────────────────────────────────────────────────────────────────────
# == INTERFACES ==

class Noise(ABC):
    """A deterministic scalar field over ``dim``-dimensional points."""

    dim: int

    @abstractmethod
    def get_noise(self, seed: Seed, point: Point) -> float:
        """Sample the field at ``point`` for ``seed``."""


class NoiseDerivative(ABC):
    @abstractmethod
    def get_noise_derivative(self, seed: Seed, point: Point) -> List[float]:
        """Partial derivatives of the field with respect to each point coordinate."""


def _as_point(point: Point, dim: int) -> List[float]:
    """
    Validate ``point`` against a field's dimension and return it as a list of floats.

    Raises:
        InvalidInputError if the point is not a numeric sequence of length ``dim``
        or contains NaN/infinite coordinates.
    """
    try:
        coords = [float(x) for x in point]
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Point must be a sequence of numbers, got {point!r}") from e
    if len(coords) != dim:
        raise InvalidInputError(f"Expected a {dim}-dimensional point, got {len(coords)} coordinates")
    if not all(math.isfinite(c) for c in coords):
        raise InvalidInputError(f"Point coordinates must be finite, got {coords}")
    return coords


def _build_gradients(dim: int) -> Tuple[Gradient, ...]:
    """
    Every vector with one zero coordinate and all other coordinates +-1.
    Yields dim * 2**(dim - 1) gradients; in one dimension just (-1,) and (1,).
    """
    if dim == 1:
        return ((-1.0,), (1.0,))
    signs = [
        tuple(((i >> j) & 1) * 2.0 - 1.0 for j in range(dim - 1))
        for i in range(2 ** (dim - 1))
    ]
    return tuple(s[:pos] + (0.0,) + s[pos:] for pos in range(dim) for s in signs)


# ─────────────────────────────────────────────────────────────────────────────
# == SINGLE OCTAVE ==

class SimplexNoise(Noise, NoiseDerivative):
    """
    One octave of simplex noise in ``dim`` dimensions.

    Attributes:
      dim: Number of input coordinates.
      skew_factor: Maps Cartesian space onto the hypercube lattice.
      unskew_factor: Maps lattice offsets back to Cartesian space.
      side_length: Edge length of a simplex in Cartesian space.
      corner_to_face_sq: Squared kernel radius; vertices farther than this contribute nothing.
      gradients: Immutable gradient table indexed by vertex hash.
      value_scalar: Normalizes output to roughly [-1, 1] regardless of ``dim``.
    """

    def __init__(self, dim: int) -> None:
        if dim < 1:
            raise InvalidInputError(f"Noise dimension must be >= 1, got {dim}")
        d = float(dim)
        self.dim = dim
        self.skew_factor = (math.sqrt(d + 1.0) - 1.0) / d if dim > 1 else 0.0
        self.unskew_factor = self.skew_factor / (d * self.skew_factor + 1.0) if dim > 1 else 1.0
        self.side_length = math.sqrt(d) / (d * self.skew_factor + 1.0)

        a = math.sqrt(self.side_length ** 2 - (self.side_length / 2.0) ** 2)
        if dim == 1:
            corner_to_face = self.side_length
        elif dim == 2:
            corner_to_face = a
        else:
            corner_to_face = math.sqrt(a ** 2 + (a / 2.0) ** 2)
        self.corner_to_face_sq = corner_to_face ** 2

        if dim > 1:
            self.value_scalar = (1.0 / math.sqrt(d - 1.0)) * (
                100.0 / ((d - 1.0) ** 3 * math.sqrt(d - 1.0)) + 13.0
            )
        else:
            self.value_scalar = 1.0
        if dim > 2:
            self.value_scalar *= HIGH_DIMENSION_NORMALIZATION

        self.gradients: Tuple[Gradient, ...] = _build_gradients(dim)

    def __repr__(self) -> str:
        return f"SimplexNoise(dim={self.dim}, gradients={len(self.gradients)})"

    def _gradient(self, seed: Seed, vertex: List[int]) -> Gradient:
        """Pick the pseudo-random gradient for a lattice vertex."""
        index = int(seed.derive(tuple(vertex)).fraction() * len(self.gradients))
        # fraction() == 1.0 only for the all-ones hash
        return self.gradients[min(index, len(self.gradients) - 1)]

    def _sample(self, seed: Seed, point: List[float]) -> Tuple[float, List[float]]:
        """Noise value and gradient at an already-validated point."""
        dim = self.dim

        # skew into lattice space and find the hypercube origin
        s = self.skew_factor * sum(point)
        origin = [math.floor(x + s) for x in point]

        # unskewed displacement from the hypercube origin
        t = self.unskew_factor * sum(origin)
        displacement = [point[i] - origin[i] + t for i in range(dim)]

        # the simplex containing the point is reached by stepping axes in
        # descending order of displacement
        axis_order = sorted(range(dim), key=lambda i: displacement[i], reverse=True)

        noise = 0.0
        derivative = [0.0] * dim
        unskew_total = 0.0
        vertex = list(origin)
        for step in range(dim + 1):
            if step:
                vertex[axis_order[step - 1]] += 1
            u = [displacement[i] - (vertex[i] - origin[i]) + unskew_total for i in range(dim)]
            attenuation = self.corner_to_face_sq - sum(c * c for c in u)
            if attenuation > 0.0:
                grad = self._gradient(seed, vertex)
                dot = sum(g * c for g, c in zip(grad, u))
                falloff = attenuation ** ATTENUATION_EXPONENT
                slope = 2.0 * ATTENUATION_EXPONENT * dot * attenuation ** (ATTENUATION_EXPONENT - 1)
                noise += dot * falloff
                for i in range(dim):
                    derivative[i] += grad[i] * falloff - slope * u[i]
            unskew_total += self.unskew_factor

        return noise * self.value_scalar, [x * self.value_scalar for x in derivative]

    def sample(self, seed: Seed, point: Point) -> Tuple[float, List[float]]:
        """Return ``(noise, derivative)`` at ``point``."""
        return self._sample(seed, _as_point(point, self.dim))

    def get_noise(self, seed: Seed, point: Point) -> float:
        return self.sample(seed, point)[0]

    def get_noise_derivative(self, seed: Seed, point: Point) -> List[float]:
        return self.sample(seed, point)[1]


# ─────────────────────────────────────────────────────────────────────────────
# == FRACTAL SUM ==

class OctavedSimplexNoise(Noise, NoiseDerivative):
    """
    Fractal sum of ``num_octaves`` independent simplex octaves.

    Octave ``i`` is sampled at ``point / octave_factor**i`` with ``seed.derive(i)``
    and weighted by ``octave_factor**i``. The sum is divided by the total weight,
    so the output range does not depend on the octave count.
    """

    def __init__(self, dim: int, num_octaves: int, octave_factor: float) -> None:
        if num_octaves < 1:
            raise InvalidInputError(f"num_octaves must be >= 1, got {num_octaves}")
        if not octave_factor > 0.0:
            raise InvalidInputError(f"octave_factor must be positive, got {octave_factor}")
        self.dim = dim
        self.octave_factor = float(octave_factor)
        # point / weight must stay finite for every octave
        out_of_range = f"{num_octaves} octaves with factor {octave_factor} give weights outside the float range"
        try:
            self.weights: Tuple[float, ...] = tuple(
                self.octave_factor ** i for i in range(num_octaves)
            )
        except OverflowError as e:
            raise InvalidInputError(out_of_range) from e
        self.weight_sum = sum(self.weights)
        if self.weights[-1] < sys.float_info.min or not math.isfinite(self.weight_sum):
            raise InvalidInputError(out_of_range)
        self.octaves: List[SimplexNoise] = [SimplexNoise(dim) for _ in range(num_octaves)]
        logger.debug(
            "Built %d-octave simplex stack (dim=%d, factor=%s, %d gradients per octave)",
            num_octaves,
            dim,
            octave_factor,
            len(self.octaves[0].gradients),
        )

    def __len__(self) -> int:
        return len(self.octaves)

    def _sample(self, seed: Seed, point: List[float]) -> Tuple[float, List[float]]:
        noise = 0.0
        derivative = [0.0] * self.dim
        for i, (octave, mul) in enumerate(zip(self.octaves, self.weights)):
            scaled = [x / mul for x in point]
            if not all(math.isfinite(x) for x in scaled):
                raise InvalidInputError(f"Point {point} overflows at octave {i}")
            oct_noise, oct_der = octave._sample(seed.derive(i), scaled)
            noise += oct_noise * mul
            # d/dp [f(p / mul) * mul] == f'(p / mul)
            for j in range(self.dim):
                derivative[j] += oct_der[j]
        return noise / self.weight_sum, [x / self.weight_sum for x in derivative]

    def get_noise(self, seed: Seed, point: Point) -> float:
        return self._sample(seed, _as_point(point, self.dim))[0]

    def get_noise_derivative(self, seed: Seed, point: Point) -> List[float]:
        return self._sample(seed, _as_point(point, self.dim))[1]


# ─────────────────────────────────────────────────────────────────────────────
# == TILING ==

class TiledOctavedSimplexNoise(Noise, NoiseDerivative):
    """
    Periodic noise over ``dim`` dimensions.

    Each coordinate is placed on a circle of radius ``scale``
    (``sin``/``cos`` of ``2*pi*x/tile_distance``) and the resulting 2*dim point is
    fed to an octave stack. Identical stack inputs recur every ``tile_distance``
    along every axis, so the field tiles without seams.
    """

    # dimensions appended after the circle embedding
    extra_dims = 0

    def __init__(
        self,
        dim: int,
        num_octaves: int,
        octave_factor: float,
        tile_distance: float,
        scale: float,
    ) -> None:
        if dim < 1:
            raise InvalidInputError(f"Noise dimension must be >= 1, got {dim}")
        if not tile_distance > 0.0:
            raise InvalidInputError(f"tile_distance must be positive, got {tile_distance}")
        if not scale > 0.0:
            raise InvalidInputError(f"scale must be positive, got {scale}")
        self.dim = dim
        self.tile_distance = float(tile_distance)
        self.scale = float(scale)
        self.source = OctavedSimplexNoise(dim * 2 + self.extra_dims, num_octaves, octave_factor)

    def _angles(self, point: List[float]) -> List[float]:
        return [x * 2.0 * math.pi / self.tile_distance for x in point]

    def _embed(self, seed: Seed, angles: List[float]) -> List[float]:
        embedded: List[float] = []
        for angle in angles:
            embedded.append(self.scale * math.sin(angle))
            embedded.append(self.scale * math.cos(angle))
        return embedded

    def get_noise(self, seed: Seed, point: Point) -> float:
        angles = self._angles(_as_point(point, self.dim))
        return self.source._sample(seed, self._embed(seed, angles))[0]

    def get_noise_derivative(self, seed: Seed, point: Point) -> List[float]:
        """Spatial gradient, chained through the circle embedding."""
        angles = self._angles(_as_point(point, self.dim))
        _, source_der = self.source._sample(seed, self._embed(seed, angles))
        k = self.scale * 2.0 * math.pi / self.tile_distance
        return [
            k * (source_der[2 * j] * math.cos(angle) - source_der[2 * j + 1] * math.sin(angle))
            for j, angle in enumerate(angles)
        ]


class SkewedTiledOctavedSimplexNoise(TiledOctavedSimplexNoise):
    """Tiled noise that also drifts smoothly, unwrapped, with ``seed.skew``."""

    extra_dims = 1

    def _embed(self, seed: Seed, angles: List[float]) -> List[float]:
        embedded = super()._embed(seed, angles)
        embedded.append(seed.skew)
        return embedded


__all__ = [
    "Noise",
    "NoiseDerivative",
    "OctavedSimplexNoise",
    "SimplexNoise",
    "SkewedTiledOctavedSimplexNoise",
    "TiledOctavedSimplexNoise",
]
