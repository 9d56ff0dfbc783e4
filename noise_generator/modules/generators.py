# noise_generator/modules/generators.py

"""
================================================================================
GENERATOR MODULES
================================================================================
Modules that take no source modules and compute their output directly from
the input point: the octave generators (Perlin, Billow, RidgedMulti), the
cell generator, white noise, and a handful of simple patterns.

The octave loops run as Numba-compiled functions; the module classes hold
the configuration and validate it when it is set.

Data Contract:
---------------
- Inputs: Kind-specific parameters (frequency, lacunarity, octave count,
  persistence, seed, quality, ...).
- Outputs: evaluate(x, y, z) -> float.
- Side Effects: None.
- Invariants: Given the same parameters, the output is deterministic.
================================================================================
"""
import enum
import math

import numpy as np
from numba import njit

from .. import config as DEFAULTS
from ..errors import InvalidParameterError
from ..noise import (
    NoiseQuality,
    fast_floor,
    gradient_coherent_noise_3d,
    make_int32_range,
    value_noise_3d,
)
from .base import Module

SQRT_3 = math.sqrt(3.0)


class CellType(enum.IntEnum):
    """Distance metric used by the Cell generator."""
    EUCLIDEAN = 0
    QUADRATIC = 1
    MANHATTAN = 2
    CHEBYSHEV = 3


# Largest nearest-seed distance each metric can produce with seeds jittered
# inside their own cells. Used to normalize the distance output to [-1, 1].
_CELL_MAX_DISTANCE = np.array([SQRT_3, 3.0, 3.0, 1.0])


@njit
def perlin_3d(x, y, z, frequency, lacunarity, persistence, octave_count, seed, quality):
    """Sum of `octave_count` octaves of gradient coherent noise."""
    value = 0.0
    current_persistence = 1.0

    px = x * frequency
    py = y * frequency
    pz = z * frequency

    for octave in range(octave_count):
        nx = make_int32_range(px)
        ny = make_int32_range(py)
        nz = make_int32_range(pz)

        octave_seed = (seed + octave) & 0x7fffffff
        signal = gradient_coherent_noise_3d(nx, ny, nz, octave_seed, quality)
        value += signal * current_persistence

        px *= lacunarity
        py *= lacunarity
        pz *= lacunarity
        current_persistence *= persistence

    return value


@njit
def billow_3d(x, y, z, frequency, lacunarity, persistence, octave_count, seed, quality):
    """Octave sum where each octave is folded with 2|s| - 1."""
    value = 0.0
    current_persistence = 1.0

    px = x * frequency
    py = y * frequency
    pz = z * frequency

    for octave in range(octave_count):
        nx = make_int32_range(px)
        ny = make_int32_range(py)
        nz = make_int32_range(pz)

        octave_seed = (seed + octave) & 0x7fffffff
        signal = gradient_coherent_noise_3d(nx, ny, nz, octave_seed, quality)
        signal = 2.0 * abs(signal) - 1.0
        value += signal * current_persistence

        px *= lacunarity
        py *= lacunarity
        pz *= lacunarity
        current_persistence *= persistence

    return value + 0.5


@njit
def ridged_multi_3d(x, y, z, frequency, lacunarity, octave_count, seed, quality,
                    spectral_weights, offset, gain):
    """
    Ridged multifractal noise. Each octave is weighted by the previous
    octave's signal, so ridges get sharper details than valleys.
    """
    value = 0.0
    weight = 1.0

    px = x * frequency
    py = y * frequency
    pz = z * frequency

    for octave in range(octave_count):
        nx = make_int32_range(px)
        ny = make_int32_range(py)
        nz = make_int32_range(pz)

        octave_seed = (seed + octave) & 0x7fffffff
        signal = gradient_coherent_noise_3d(nx, ny, nz, octave_seed, quality)

        # Make the ridges.
        signal = abs(signal)
        signal = offset - signal
        signal *= signal
        # Attenuate by the previous octave.
        signal *= weight

        weight = signal * gain
        if weight > 1.0:
            weight = 1.0
        elif weight < 0.0:
            weight = 0.0

        value += signal * spectral_weights[octave]

        px *= lacunarity
        py *= lacunarity
        pz *= lacunarity

    return (value * 1.25) - 1.0


@njit
def _cell_distance(dx, dy, dz, cell_type):
    if cell_type == 0:
        return math.sqrt(dx * dx + dy * dy + dz * dz)
    elif cell_type == 1:
        return dx * dx + dy * dy + dz * dz
    elif cell_type == 2:
        return abs(dx) + abs(dy) + abs(dz)
    return max(abs(dx), max(abs(dy), abs(dz)))


@njit
def cell_3d(x, y, z, frequency, displacement, seed, enable_distance, cell_type, max_distance):
    """
    Voronoi cell noise. Every unit cell holds one seed point; the output is
    the nearest seed's pseudo-random cell value, optionally plus a term that
    grows with the distance to that seed.
    """
    px = x * frequency
    py = y * frequency
    pz = z * frequency
    if not (np.isfinite(px) and np.isfinite(py) and np.isfinite(pz)):
        return np.nan

    x_int = fast_floor(px)
    y_int = fast_floor(py)
    z_int = fast_floor(pz)

    min_dist = np.inf
    x_candidate = 0.0
    y_candidate = 0.0
    z_candidate = 0.0

    # Seeds stay inside their own cell, so the 3x3x3 neighbourhood always
    # contains the nearest one.
    for z_cur in range(z_int - 1, z_int + 2):
        for y_cur in range(y_int - 1, y_int + 2):
            for x_cur in range(x_int - 1, x_int + 2):
                x_pos = x_cur + (value_noise_3d(x_cur, y_cur, z_cur, seed) + 1.0) * 0.5
                y_pos = y_cur + (value_noise_3d(x_cur, y_cur, z_cur, seed + 1) + 1.0) * 0.5
                z_pos = z_cur + (value_noise_3d(x_cur, y_cur, z_cur, seed + 2) + 1.0) * 0.5
                dist = _cell_distance(x_pos - px, y_pos - py, z_pos - pz, cell_type)
                if dist < min_dist:
                    min_dist = dist
                    x_candidate = x_pos
                    y_candidate = y_pos
                    z_candidate = z_pos

    value = 0.0
    if enable_distance:
        value = (2.0 * min_dist / max_distance) - 1.0

    return value + displacement * value_noise_3d(
        fast_floor(x_candidate), fast_floor(y_candidate), fast_floor(z_candidate), seed
    )


@njit
def white_3d(x, y, z, scale, seed):
    """Value noise at the truncated lattice point (x, y, z) * scale."""
    if not (np.isfinite(x * scale) and np.isfinite(y * scale) and np.isfinite(z * scale)):
        return np.nan
    return value_noise_3d(int(x * scale), int(y * scale), int(z * scale), seed)


def _check_octave_count(octave_count: int) -> int:
    octave_count = int(octave_count)
    if not 1 <= octave_count <= DEFAULTS.MAX_OCTAVE_COUNT:
        raise InvalidParameterError(
            f"octave_count must be in [1, {DEFAULTS.MAX_OCTAVE_COUNT}], got {octave_count}."
        )
    return octave_count


class Const(Module):
    """Outputs a constant value."""

    def __init__(self, const_value: float = DEFAULTS.DEFAULT_CONST_VALUE):
        super().__init__()
        self.const_value = float(const_value)

    def evaluate(self, x, y, z):
        return self.const_value


class Checkerboard(Module):
    """
    Outputs unit-sized blocks alternating between -1.0 and +1.0. Mostly
    useful for debugging graphs and projections.
    """

    def evaluate(self, x, y, z):
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
            return math.nan
        ix = fast_floor(x)
        iy = fast_floor(y)
        iz = fast_floor(z)
        return -1.0 if ((ix & 1) ^ (iy & 1) ^ (iz & 1)) else 1.0


class White(Module):
    """
    Uncorrelated noise: the input point is snapped to a lattice of `scale`
    cells per unit and every cell gets an independent value.
    """

    def __init__(self, scale: int = DEFAULTS.DEFAULT_WHITE_SCALE, seed: int = DEFAULTS.DEFAULT_SEED):
        super().__init__()
        self.scale = int(scale)
        self.seed = int(seed)

    def evaluate(self, x, y, z):
        return white_3d(float(x), float(y), float(z), self.scale, self.seed)


class _OctaveGenerator(Module):
    """Parameters shared by the octave generators."""

    def __init__(self,
                 frequency: float = DEFAULTS.DEFAULT_FREQUENCY,
                 lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY,
                 octave_count: int = DEFAULTS.DEFAULT_OCTAVE_COUNT,
                 seed: int = DEFAULTS.DEFAULT_SEED,
                 quality: NoiseQuality = NoiseQuality.STANDARD):
        super().__init__()
        self.frequency = float(frequency)
        self._lacunarity = float(lacunarity)
        self._octave_count = _check_octave_count(octave_count)
        self.seed = int(seed)
        self.quality = NoiseQuality(quality)

    @property
    def lacunarity(self) -> float:
        """Frequency multiplier between successive octaves."""
        return self._lacunarity

    @lacunarity.setter
    def lacunarity(self, value: float) -> None:
        self._lacunarity = float(value)

    @property
    def octave_count(self) -> int:
        return self._octave_count

    @octave_count.setter
    def octave_count(self, value: int) -> None:
        self._octave_count = _check_octave_count(value)


class Perlin(_OctaveGenerator):
    """
    Perlin noise: the sum of several octaves of coherent gradient noise, each
    with a higher frequency and a lower amplitude than the last.

    The output usually lies in [-1, 1] but is not clamped; a high
    persistence with many octaves can exceed that range.
    """

    def __init__(self,
                 frequency: float = DEFAULTS.DEFAULT_FREQUENCY,
                 lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY,
                 octave_count: int = DEFAULTS.DEFAULT_OCTAVE_COUNT,
                 persistence: float = DEFAULTS.DEFAULT_PERSISTENCE,
                 seed: int = DEFAULTS.DEFAULT_SEED,
                 quality: NoiseQuality = NoiseQuality.STANDARD):
        super().__init__(frequency, lacunarity, octave_count, seed, quality)
        self.persistence = float(persistence)

    def evaluate(self, x, y, z):
        return perlin_3d(
            x, y, z, self.frequency, self._lacunarity, self.persistence,
            self._octave_count, self.seed, int(self.quality)
        )


class Billow(Perlin):
    """
    "Billowy" noise suited to clouds and rocks. Identical to Perlin except
    each octave is folded with an absolute value, and the sum is shifted
    up by 0.5.
    """

    def evaluate(self, x, y, z):
        return billow_3d(
            x, y, z, self.frequency, self._lacunarity, self.persistence,
            self._octave_count, self.seed, int(self.quality)
        )


class RidgedMulti(_OctaveGenerator):
    """
    Ridged multifractal noise, suited to mountain ranges. Higher octaves are
    weighted by the previous octave's signal and by a per-octave spectral
    weight that depends on the lacunarity. There is no persistence.
    """

    def __init__(self,
                 frequency: float = DEFAULTS.DEFAULT_FREQUENCY,
                 lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY,
                 octave_count: int = DEFAULTS.DEFAULT_OCTAVE_COUNT,
                 seed: int = DEFAULTS.DEFAULT_SEED,
                 quality: NoiseQuality = NoiseQuality.STANDARD):
        super().__init__(frequency, lacunarity, octave_count, seed, quality)
        self._spectral_weights = self._calc_spectral_weights(self._lacunarity)

    @staticmethod
    def _calc_spectral_weights(lacunarity: float) -> np.ndarray:
        weights = np.empty(DEFAULTS.MAX_OCTAVE_COUNT, dtype=np.float64)
        frequency = 1.0
        for i in range(DEFAULTS.MAX_OCTAVE_COUNT):
            weights[i] = frequency ** -DEFAULTS.RIDGED_SPECTRAL_EXPONENT
            frequency *= lacunarity
        return weights

    @_OctaveGenerator.lacunarity.setter
    def lacunarity(self, value: float) -> None:
        self._lacunarity = float(value)
        self._spectral_weights = self._calc_spectral_weights(self._lacunarity)

    def evaluate(self, x, y, z):
        return ridged_multi_3d(
            x, y, z, self.frequency, self._lacunarity, self._octave_count,
            self.seed, int(self.quality), self._spectral_weights,
            DEFAULTS.RIDGED_OFFSET, DEFAULTS.RIDGED_GAIN
        )


class Cell(Module):
    """
    Voronoi cell noise. Space is divided into cells around pseudo-random
    seed points, one per unit lattice cell.

    With `enable_distance` off, every cell outputs a constant value scaled by
    `displacement`. With it on, the distance to the nearest seed is added,
    normalized to [-1, 1] for the chosen metric, which shades each cell
    from its seed outwards.
    """

    def __init__(self,
                 frequency: float = DEFAULTS.DEFAULT_FREQUENCY,
                 displacement: float = DEFAULTS.DEFAULT_CELL_DISPLACEMENT,
                 seed: int = DEFAULTS.DEFAULT_SEED,
                 enable_distance: bool = DEFAULTS.DEFAULT_CELL_ENABLE_DISTANCE,
                 cell_type: CellType = CellType.EUCLIDEAN):
        super().__init__()
        self.frequency = float(frequency)
        self.displacement = float(displacement)
        self.seed = int(seed)
        self.enable_distance = bool(enable_distance)
        self.cell_type = CellType(cell_type)

    def evaluate(self, x, y, z):
        cell_type = int(self.cell_type)
        return cell_3d(
            x, y, z, self.frequency, self.displacement, self.seed,
            self.enable_distance, cell_type, _CELL_MAX_DISTANCE[cell_type]
        )


class Cylinders(Module):
    """Concentric cylinders around the y axis, one per unit of radius."""

    def __init__(self, frequency: float = DEFAULTS.DEFAULT_FREQUENCY):
        super().__init__()
        self.frequency = float(frequency)

    def evaluate(self, x, y, z):
        x *= self.frequency
        z *= self.frequency

        dist_from_center = math.sqrt(x * x + z * z)
        dist_from_smaller = dist_from_center % 1.0
        dist_from_larger = 1.0 - dist_from_smaller
        nearest_dist = min(dist_from_smaller, dist_from_larger)
        return 1.0 - (nearest_dist * 4.0)


class Spheres(Module):
    """Concentric spheres around the origin, one per unit of radius."""

    def __init__(self, frequency: float = DEFAULTS.DEFAULT_FREQUENCY):
        super().__init__()
        self.frequency = float(frequency)

    def evaluate(self, x, y, z):
        x *= self.frequency
        y *= self.frequency
        z *= self.frequency

        dist_from_center = math.sqrt(x * x + y * y + z * z)
        dist_from_smaller = dist_from_center % 1.0
        dist_from_larger = 1.0 - dist_from_smaller
        nearest_dist = min(dist_from_smaller, dist_from_larger)
        return 1.0 - (nearest_dist * 4.0)
