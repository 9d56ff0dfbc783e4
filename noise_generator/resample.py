# noise_generator/resample.py

"""
================================================================================
RESAMPLING FILTERS
================================================================================
Resizes a NoiseCube (trilinear) or a NoiseMap (bilinear) to a new resolution.

Each destination cell is mapped back to a fractional source coordinate with
the half-cell convention `u = (x + 0.5) * Ws / Wd - 0.5`, and the surrounding
source samples are interpolated. Reads that fall outside the source return
its border value, unless `clamp` pins the corner indices to the edge.

The kernels run under Numba with `parallel=True`; every destination slice
(or row) is independent, so `prange` spreads them over all cores.

Data Contract:
---------------
- Inputs: A source container, the destination size, and the clamp flag.
- Outputs: A new container of the requested size. The source is not modified.
- Side Effects: None.
================================================================================
"""
import numpy as np
from numba import njit, prange

from .noise import fast_floor, linear, trilinear


@njit
def _clamp_index(i, size):
    if i < 0:
        return 0
    if i > size - 1:
        return size - 1
    return i


@njit
def _sample_3d(src, x, y, z, border_value):
    depth, height, width = src.shape
    if x >= 0 and x < width and y >= 0 and y < height and z >= 0 and z < depth:
        return src[z, y, x]
    return border_value


@njit
def _sample_2d(src, x, y, border_value):
    height, width = src.shape
    if x >= 0 and x < width and y >= 0 and y < height:
        return src[y, x]
    return border_value


@njit(parallel=True)
def _trilinear_kernel(src, border_value, width, height, depth, clamp):
    src_depth, src_height, src_width = src.shape
    dest = np.empty((depth, height, width), dtype=np.float32)

    x_ratio = src_width / width
    y_ratio = src_height / height
    z_ratio = src_depth / depth

    for z in prange(depth):
        w = (z + 0.5) * z_ratio - 0.5
        z0 = fast_floor(w)
        zf = w - z0
        z1 = z0 + 1
        if clamp:
            z0 = _clamp_index(z0, src_depth)
            z1 = _clamp_index(z1, src_depth)

        for y in range(height):
            v = (y + 0.5) * y_ratio - 0.5
            y0 = fast_floor(v)
            yf = v - y0
            y1 = y0 + 1
            if clamp:
                y0 = _clamp_index(y0, src_height)
                y1 = _clamp_index(y1, src_height)

            for x in range(width):
                u = (x + 0.5) * x_ratio - 0.5
                x0 = fast_floor(u)
                xf = u - x0
                x1 = x0 + 1
                if clamp:
                    x0 = _clamp_index(x0, src_width)
                    x1 = _clamp_index(x1, src_width)

                c000 = _sample_3d(src, x0, y0, z0, border_value)
                c001 = _sample_3d(src, x0, y0, z1, border_value)
                c010 = _sample_3d(src, x0, y1, z0, border_value)
                c011 = _sample_3d(src, x0, y1, z1, border_value)
                c100 = _sample_3d(src, x1, y0, z0, border_value)
                c101 = _sample_3d(src, x1, y0, z1, border_value)
                c110 = _sample_3d(src, x1, y1, z0, border_value)
                c111 = _sample_3d(src, x1, y1, z1, border_value)

                dest[z, y, x] = trilinear(xf, yf, zf, c000, c001, c010, c011, c100, c101, c110, c111)

    return dest


@njit(parallel=True)
def _bilinear_kernel(src, border_value, width, height, clamp):
    src_height, src_width = src.shape
    dest = np.empty((height, width), dtype=np.float32)

    x_ratio = src_width / width
    y_ratio = src_height / height

    for y in prange(height):
        v = (y + 0.5) * y_ratio - 0.5
        y0 = fast_floor(v)
        yf = v - y0
        y1 = y0 + 1
        if clamp:
            y0 = _clamp_index(y0, src_height)
            y1 = _clamp_index(y1, src_height)

        for x in range(width):
            u = (x + 0.5) * x_ratio - 0.5
            x0 = fast_floor(u)
            xf = u - x0
            x1 = x0 + 1
            if clamp:
                x0 = _clamp_index(x0, src_width)
                x1 = _clamp_index(x1, src_width)

            c00 = _sample_2d(src, x0, y0, border_value)
            c10 = _sample_2d(src, x1, y0, border_value)
            c01 = _sample_2d(src, x0, y1, border_value)
            c11 = _sample_2d(src, x1, y1, border_value)

            dest[y, x] = linear(linear(c00, c10, xf), linear(c01, c11, xf), yf)

    return dest


def trilinear_filter(src, width: int, height: int, depth: int, clamp: bool = False):
    """
    Returns a new NoiseCube of size (width, height, depth) resampled from
    `src` with trilinear interpolation. Samples outside `src` read its
    border value; the new cube's own border value starts at 0.
    """
    from .containers import NoiseCube

    dest = NoiseCube(width, height, depth)
    if dest.is_empty:
        return dest
    if src.is_empty:
        dest.clear(src.border_value)
        return dest

    dest.values[...] = _trilinear_kernel(
        src.values, np.float32(src.border_value), width, height, depth, bool(clamp)
    )
    return dest


def bilinear_filter(src, width: int, height: int, clamp: bool = False):
    """
    Returns a new NoiseMap of size (width, height) resampled from `src` with
    bilinear interpolation. The new map's border value starts at 0.
    """
    from .containers import NoiseMap

    dest = NoiseMap(width, height)
    if dest.is_empty:
        return dest
    if src.is_empty:
        dest.clear(src.border_value)
        return dest

    dest.values[...] = _bilinear_kernel(
        src.values, np.float32(src.border_value), width, height, bool(clamp)
    )
    return dest
