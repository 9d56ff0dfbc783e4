# noise_generator/noise.py

"""
================================================================================
COHERENT NOISE PRIMITIVES
================================================================================
This module provides the low-level functions every noise module is built on:
lattice hashing, value noise, gradient noise, coherent noise with selectable
interpolation quality, and the interpolation curves used to blend them. It is
designed to be a pure, stateless utility.

Data Contract:
---------------
- Inputs:
    - x, y, z: Floating point sample coordinates.
    - ix, iy, iz: Integer lattice coordinates.
    - seed: Integer noise seed.
    - quality: A NoiseQuality value selecting the interpolation curve.
- Outputs:
    - Floating point noise values (value/gradient noise in approx. [-1, 1]).
- Side Effects: None.
- Invariants: For a given (coordinates, seed) the output is bit-identical on
  every platform. The lattice hash only keeps the low 31 or 32 bits of its
  integer arithmetic, so overflow behavior never changes the result.
================================================================================
"""

import enum
import math

import numpy as np
from numba import njit


class NoiseQuality(enum.IntEnum):
    """Interpolation curve used between lattice points."""
    FAST = 0      # linear
    STANDARD = 1  # cubic s-curve
    BEST = 2      # quintic s-curve


# --- Lattice Hashing Constants ---
# Large primes used to decorrelate the lattice axes and the seed.
X_NOISE_GEN = 1619
Y_NOISE_GEN = 31337
Z_NOISE_GEN = 6971
SEED_NOISE_GEN = 1013
SHIFT_NOISE_GEN = 8

# Keeps the sum of the eight gradient contributions inside [-1, 1].
GRADIENT_SCALE = 2.12

# Coordinates are folded into this range before lattice hashing.
INT32_RANGE_LIMIT = 1073741824.0

# Seed of the hash stream that produces the gradient table.
GRADIENT_TABLE_SEED = 7919


@njit
def fast_floor(v):
    """Largest integer not greater than v."""
    i = int(v)
    return i - 1 if v < i else i


@njit
def linear(a, b, alpha):
    "Linear interpolation."
    return a + alpha * (b - a)


@njit
def s_curve3(t):
    "3t^2 - 2t^3"
    return t * t * (3.0 - 2.0 * t)


@njit
def s_curve5(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


@njit
def cubic_interp(n0, n1, n2, n3, a):
    """
    Cubic interpolation between n1 (a = 0) and n2 (a = 1), using n0 and n3
    as the outer neighbors that shape the tangents.
    """
    p = (n3 - n2) - (n0 - n1)
    q = (n0 - n1) - p
    r = n2 - n0
    s = n1
    return p * a * a * a + q * a * a + r * a + s


@njit
def trilinear(xf, yf, zf, c000, c001, c010, c011, c100, c101, c110, c111):
    """
    Trilinear interpolation of the eight corners of a unit cube. Corner
    names follow cXYZ, with 0 the low and 1 the high index on each axis.
    """
    c00 = linear(c000, c100, xf)
    c01 = linear(c001, c101, xf)
    c10 = linear(c010, c110, xf)
    c11 = linear(c011, c111, xf)
    c0 = linear(c00, c10, yf)
    c1 = linear(c01, c11, yf)
    return linear(c0, c1, zf)


@njit
def make_int32_range(n):
    """Folds a coordinate into [-2^30, 2^30) so lattice hashing cannot overflow."""
    if n >= INT32_RANGE_LIMIT:
        return (2.0 * np.fmod(n, INT32_RANGE_LIMIT)) - INT32_RANGE_LIMIT
    elif n <= -INT32_RANGE_LIMIT:
        return (2.0 * np.fmod(n, INT32_RANGE_LIMIT)) + INT32_RANGE_LIMIT
    return n


@njit
def int_value_noise_3d(ix, iy, iz, seed):
    """Hashes a lattice point and a seed into an integer in [0, 2^31)."""
    n = (X_NOISE_GEN * ix + Y_NOISE_GEN * iy + Z_NOISE_GEN * iz + SEED_NOISE_GEN * seed) & 0x7fffffff
    n = (n >> 13) ^ n
    return (n * (n * n * 60493 + 19990303) + 1376312589) & 0x7fffffff


@njit
def value_noise_3d(ix, iy, iz, seed):
    """Uncorrelated noise value in [-1, 1] for a lattice point."""
    return 1.0 - (int_value_noise_3d(ix, iy, iz, seed) / 1073741824.0)


def _build_gradient_table() -> np.ndarray:
    """
    Derives 256 unit gradient vectors from the lattice hash. Candidates are
    drawn from the cube [-1, 1]^3 and only kept when they fall inside the
    unit ball, so the normalized directions are evenly spread.
    """
    vectors = np.empty((256, 3), dtype=np.float64)
    count = 0
    candidate = 0
    while count < 256:
        vx = value_noise_3d(candidate, 0, 0, GRADIENT_TABLE_SEED)
        vy = value_noise_3d(candidate, 1, 0, GRADIENT_TABLE_SEED)
        vz = value_noise_3d(candidate, 2, 0, GRADIENT_TABLE_SEED)
        candidate += 1

        length = math.sqrt(vx * vx + vy * vy + vz * vz)
        if length < 0.1 or length > 1.0:
            continue
        vectors[count, 0] = vx / length
        vectors[count, 1] = vy / length
        vectors[count, 2] = vz / length
        count += 1
    return vectors


# Pre-computed gradient vectors, looked up by the lattice hash.
_RANDOM_VECTORS = _build_gradient_table()


@njit
def gradient_noise_3d(fx, fy, fz, ix, iy, iz, seed):
    """
    Dot product of the pseudo-random gradient at lattice point (ix, iy, iz)
    with the displacement from that point to (fx, fy, fz).
    """
    vector_index = (X_NOISE_GEN * ix + Y_NOISE_GEN * iy + Z_NOISE_GEN * iz + SEED_NOISE_GEN * seed) & 0xffffffff
    vector_index ^= (vector_index >> SHIFT_NOISE_GEN)
    vector_index &= 0xff

    x_gradient = _RANDOM_VECTORS[vector_index, 0]
    y_gradient = _RANDOM_VECTORS[vector_index, 1]
    z_gradient = _RANDOM_VECTORS[vector_index, 2]

    x_point = fx - ix
    y_point = fy - iy
    z_point = fz - iz

    return (x_gradient * x_point + y_gradient * y_point + z_gradient * z_point) * GRADIENT_SCALE


@njit
def _quality_weight(t, quality):
    if quality == 0:
        return t
    elif quality == 1:
        return s_curve3(t)
    return s_curve5(t)


@njit
def gradient_coherent_noise_3d(x, y, z, seed, quality):
    """
    Coherent gradient noise: blends the gradient noise of the eight corners
    of the lattice cube containing (x, y, z).
    """
    # Non-finite points have no lattice cell.
    if not (np.isfinite(x) and np.isfinite(y) and np.isfinite(z)):
        return np.nan

    x0 = fast_floor(x)
    y0 = fast_floor(y)
    z0 = fast_floor(z)
    x1 = x0 + 1
    y1 = y0 + 1
    z1 = z0 + 1

    xs = _quality_weight(x - x0, quality)
    ys = _quality_weight(y - y0, quality)
    zs = _quality_weight(z - z0, quality)

    n0 = gradient_noise_3d(x, y, z, x0, y0, z0, seed)
    n1 = gradient_noise_3d(x, y, z, x1, y0, z0, seed)
    ix0 = linear(n0, n1, xs)
    n0 = gradient_noise_3d(x, y, z, x0, y1, z0, seed)
    n1 = gradient_noise_3d(x, y, z, x1, y1, z0, seed)
    ix1 = linear(n0, n1, xs)
    iy0 = linear(ix0, ix1, ys)

    n0 = gradient_noise_3d(x, y, z, x0, y0, z1, seed)
    n1 = gradient_noise_3d(x, y, z, x1, y0, z1, seed)
    ix0 = linear(n0, n1, xs)
    n0 = gradient_noise_3d(x, y, z, x0, y1, z1, seed)
    n1 = gradient_noise_3d(x, y, z, x1, y1, z1, seed)
    ix1 = linear(n0, n1, xs)
    iy1 = linear(ix0, ix1, ys)

    return linear(iy0, iy1, zs)


@njit
def value_coherent_noise_3d(x, y, z, seed, quality):
    """Coherent value noise: same blend as the gradient variant over value noise."""
    if not (np.isfinite(x) and np.isfinite(y) and np.isfinite(z)):
        return np.nan

    x0 = fast_floor(x)
    y0 = fast_floor(y)
    z0 = fast_floor(z)
    x1 = x0 + 1
    y1 = y0 + 1
    z1 = z0 + 1

    xs = _quality_weight(x - x0, quality)
    ys = _quality_weight(y - y0, quality)
    zs = _quality_weight(z - z0, quality)

    ix0 = linear(value_noise_3d(x0, y0, z0, seed), value_noise_3d(x1, y0, z0, seed), xs)
    ix1 = linear(value_noise_3d(x0, y1, z0, seed), value_noise_3d(x1, y1, z0, seed), xs)
    iy0 = linear(ix0, ix1, ys)
    ix0 = linear(value_noise_3d(x0, y0, z1, seed), value_noise_3d(x1, y0, z1, seed), xs)
    ix1 = linear(value_noise_3d(x0, y1, z1, seed), value_noise_3d(x1, y1, z1, seed), xs)
    iy1 = linear(ix0, ix1, ys)
    return linear(iy0, iy1, zs)


@njit
def lat_lon_to_xyz(lat, lon):
    """Converts a latitude/longitude in degrees to a point on the unit sphere."""
    r = math.cos(math.radians(lat))
    x = r * math.cos(math.radians(lon))
    y = math.sin(math.radians(lat))
    z = r * math.sin(math.radians(lon))
    return x, y, z


def ieee_pow(base: float, exponent: float) -> float:
    """
    base ** exponent with IEEE 754 results (nan, inf) where math.pow raises,
    e.g. a negative base with a fractional exponent.
    """
    try:
        return math.pow(base, exponent)
    except (ValueError, OverflowError):
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            return float(np.power(np.float64(base), np.float64(exponent)))
