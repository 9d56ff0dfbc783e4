# noise_generator/color_maps.py

"""
================================================================================
GRADIENT COLOR MAPPING
================================================================================
Converts noise maps into RGBA images. A GradientColor holds a sorted list of
(position, color) points; noise values between two points are colored by
linear interpolation. For rendering whole maps the gradient is sampled once
into a lookup table (LUT) and applied with vectorized numpy indexing.

It is designed to be a pure, stateless utility: the only object that keeps
state is the gradient the caller builds.

Data Contract:
---------------
- Inputs:
    - NoiseMap (float32 values, usually in [-1, 1]).
    - GradientColor definitions.
- Outputs:
    - uint8 RGBA arrays of shape (height, width, 4), or Pillow images.
- Side Effects: None.
================================================================================
"""
import bisect
from typing import NamedTuple

import numpy as np
from PIL import Image

from . import config as DEFAULTS
from .errors import InvalidParameterError


class Color(NamedTuple):
    """An 8-bit RGBA color."""
    red: int
    green: int
    blue: int
    alpha: int = 255


def linear_interp_color(color0: Color, color1: Color, alpha: float) -> Color:
    """Blends two colors channel by channel; alpha 0 gives color0, 1 gives color1."""
    return Color(*(int(c1 * alpha + c0 * (1.0 - alpha)) for c0, c1 in zip(color0, color1)))


class GradientColor:
    """A color gradient defined by points at arbitrary positions."""

    def __init__(self):
        self._positions = []
        self._colors = []

    @property
    def points(self) -> list:
        """(position, color) pairs sorted by position."""
        return list(zip(self._positions, self._colors))

    def add_gradient_point(self, position: float, color: tuple) -> None:
        """Adds a point; each position may only be used once."""
        position = float(position)
        index = bisect.bisect_left(self._positions, position)
        if index < len(self._positions) and self._positions[index] == position:
            raise InvalidParameterError(f"Gradient already has a point at {position}.")
        self._positions.insert(index, position)
        self._colors.insert(index, Color(*color))

    def clear(self) -> None:
        self._positions = []
        self._colors = []

    def get_color(self, position: float) -> Color:
        """Returns the color at `position`, clamped to the end points."""
        if len(self._positions) < 2:
            raise InvalidParameterError("A gradient needs at least two points.")

        last = len(self._positions) - 1
        index_pos = bisect.bisect_right(self._positions, position)
        index0 = min(max(index_pos - 1, 0), last)
        index1 = min(max(index_pos, 0), last)

        if index0 == index1:
            return self._colors[index1]

        input0 = self._positions[index0]
        input1 = self._positions[index1]
        alpha = (position - input0) / (input1 - input0)
        return linear_interp_color(self._colors[index0], self._colors[index1], alpha)


def build_grayscale_gradient() -> GradientColor:
    gradient = GradientColor()
    gradient.add_gradient_point(-1.0, (0, 0, 0, 255))
    gradient.add_gradient_point(1.0, (255, 255, 255, 255))
    return gradient


def build_terrain_gradient() -> GradientColor:
    """A gradient for height maps: ocean below 0, then sand, grass, dirt, rock and snow."""
    gradient = GradientColor()
    gradient.add_gradient_point(-1.00, (0, 0, 128, 255))
    gradient.add_gradient_point(-0.20, (32, 64, 128, 255))
    gradient.add_gradient_point(-0.04, (64, 96, 192, 255))
    gradient.add_gradient_point(-0.02, (192, 192, 128, 255))
    gradient.add_gradient_point(0.00, (0, 192, 0, 255))
    gradient.add_gradient_point(0.25, (192, 192, 0, 255))
    gradient.add_gradient_point(0.50, (160, 96, 64, 255))
    gradient.add_gradient_point(0.75, (128, 255, 255, 255))
    gradient.add_gradient_point(1.00, (255, 255, 255, 255))
    return gradient


GRADIENTS = {
    "grayscale": build_grayscale_gradient,
    "terrain": build_terrain_gradient,
}


# --- Color Lookup Table (LUT) Generation ---
def create_gradient_lut(gradient: GradientColor,
                        steps: int = DEFAULTS.GRADIENT_LUT_STEPS,
                        lower_value: float = DEFAULTS.RENDER_LOWER_VALUE,
                        upper_value: float = DEFAULTS.RENDER_UPPER_VALUE) -> np.ndarray:
    """Samples `gradient` at `steps` evenly spaced values into a (steps, 4) uint8 LUT."""
    positions = np.linspace(lower_value, upper_value, steps)
    return np.array([gradient.get_color(p) for p in positions], dtype=np.uint8)


def get_color_array(noise_map, lut: np.ndarray,
                    lower_value: float = DEFAULTS.RENDER_LOWER_VALUE,
                    upper_value: float = DEFAULTS.RENDER_UPPER_VALUE) -> np.ndarray:
    """
    Maps every value of `noise_map` through the LUT. Values outside
    [lower_value, upper_value] take the end colors.
    """
    if noise_map.is_empty:
        return np.zeros((0, 0, 4), dtype=np.uint8)

    steps = lut.shape[0]
    normalized = (noise_map.values - lower_value) / (upper_value - lower_value)
    normalized = np.nan_to_num(normalized, nan=0.0)
    indices = np.clip(np.rint(normalized * (steps - 1)), 0, steps - 1).astype(np.intp)
    return lut[indices]


def to_image(noise_map, gradient: GradientColor = None) -> Image.Image:
    """Renders a NoiseMap to an RGBA Pillow image (grayscale by default)."""
    if noise_map.is_empty:
        raise InvalidParameterError("Cannot render an empty noise map.")
    gradient = gradient or build_grayscale_gradient()
    color_array = get_color_array(noise_map, create_gradient_lut(gradient))
    return Image.fromarray(np.ascontiguousarray(color_array))
