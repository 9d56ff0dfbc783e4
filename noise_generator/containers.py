# noise_generator/containers.py

"""
================================================================================
DENSE NOISE CONTAINERS
================================================================================
NoiseMap (2D) and NoiseCube (3D) hold the output of a grid build as a
float32 numpy array. Reads outside the configured size return the border
value and writes outside it are ignored, so filters and renderers can sample
neighbours without bounds checks of their own.

Data Contract:
---------------
- NoiseMap.values: float32 array of shape (height, width), indexed [y, x].
- NoiseCube.values: float32 array of shape (depth, height, width), indexed
  [z, y, x].
- get_value / set_value (and [] indexing) take coordinates in (x, y[, z])
  order.
- A container with any dimension of 0 is empty: it holds no array, every
  read returns the border value and every write is a no-op.
================================================================================
"""
from __future__ import annotations

import numpy as np

from .errors import InvalidParameterError


def _check_dimensions(**dims) -> None:
    for name, value in dims.items():
        if value < 0:
            raise InvalidParameterError(f"Parameter {name} cannot be less than 0, got {value}.")


class NoiseMap:
    """A 2D grid of noise values with border-value read-through."""

    def __init__(self, width: int = 0, height: int = 0, border_value: float = 0.0):
        self._values = None
        self.width = 0
        self.height = 0
        self.set_size(width, height)
        self.border_value = float(border_value)

    @property
    def values(self) -> np.ndarray | None:
        """The backing array, shape (height, width); None when empty."""
        return self._values

    @property
    def is_empty(self) -> bool:
        return self._values is None

    @property
    def shape(self) -> tuple:
        return (self.height, self.width)

    def set_size(self, width: int, height: int) -> None:
        """Resizes the map. Existing values are discarded."""
        width = int(width)
        height = int(height)
        _check_dimensions(width=width, height=height)
        if width == 0 or height == 0:
            self.reset()
            return
        self._values = np.zeros((height, width), dtype=np.float32)
        self.width = width
        self.height = height

    def reset(self) -> None:
        """Releases the array and returns the map to its empty state."""
        self._values = None
        self.width = 0
        self.height = 0
        self.border_value = 0.0

    def clear(self, value: float = 0.0) -> None:
        """Sets every cell to `value`."""
        if self._values is not None:
            self._values.fill(value)

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_value(self, x: int, y: int) -> float:
        if self._values is not None and self._in_bounds(x, y):
            return float(self._values[y, x])
        return self.border_value

    def set_value(self, x: int, y: int, value: float) -> None:
        if self._values is not None and self._in_bounds(x, y):
            self._values[y, x] = value

    def __getitem__(self, key: tuple) -> float:
        x, y = key
        return self.get_value(x, y)

    def __setitem__(self, key: tuple, value: float) -> None:
        x, y = key
        self.set_value(x, y, value)

    def copy(self) -> NoiseMap:
        other = NoiseMap()
        if self._values is not None:
            other._values = self._values.copy()
            other.width = self.width
            other.height = self.height
        other.border_value = self.border_value
        return other

    @staticmethod
    def bilinear_filter(src: NoiseMap, width: int, height: int, clamp: bool = False) -> NoiseMap:
        """Creates a resized copy of `src` using bilinear interpolation."""
        from .resample import bilinear_filter
        return bilinear_filter(src, width, height, clamp)

    def __repr__(self) -> str:
        return f"<NoiseMap {self.width}x{self.height} border={self.border_value}>"


class NoiseCube:
    """A 3D grid of noise values with border-value read-through."""

    def __init__(self, width: int = 0, height: int = 0, depth: int = 0, border_value: float = 0.0):
        self._values = None
        self.width = 0
        self.height = 0
        self.depth = 0
        self.set_size(width, height, depth)
        self.border_value = float(border_value)

    @property
    def values(self) -> np.ndarray | None:
        """The backing array, shape (depth, height, width); None when empty."""
        return self._values

    @property
    def is_empty(self) -> bool:
        return self._values is None

    @property
    def shape(self) -> tuple:
        return (self.depth, self.height, self.width)

    def set_size(self, width: int, height: int, depth: int) -> None:
        """Resizes the cube. Existing values are discarded."""
        width = int(width)
        height = int(height)
        depth = int(depth)
        _check_dimensions(width=width, height=height, depth=depth)
        if width == 0 or height == 0 or depth == 0:
            self.reset()
            return
        self._values = np.zeros((depth, height, width), dtype=np.float32)
        self.width = width
        self.height = height
        self.depth = depth

    def reset(self) -> None:
        self._values = None
        self.width = 0
        self.height = 0
        self.depth = 0
        self.border_value = 0.0

    def clear(self, value: float = 0.0) -> None:
        if self._values is not None:
            self._values.fill(value)

    def _in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth

    def get_value(self, x: int, y: int, z: int) -> float:
        if self._values is not None and self._in_bounds(x, y, z):
            return float(self._values[z, y, x])
        return self.border_value

    def set_value(self, x: int, y: int, z: int, value: float) -> None:
        if self._values is not None and self._in_bounds(x, y, z):
            self._values[z, y, x] = value

    def __getitem__(self, key: tuple) -> float:
        x, y, z = key
        return self.get_value(x, y, z)

    def __setitem__(self, key: tuple, value: float) -> None:
        x, y, z = key
        self.set_value(x, y, z, value)

    def copy(self) -> NoiseCube:
        other = NoiseCube()
        if self._values is not None:
            other._values = self._values.copy()
            other.width = self.width
            other.height = self.height
            other.depth = self.depth
        other.border_value = self.border_value
        return other

    @staticmethod
    def trilinear_filter(src: NoiseCube, width: int, height: int, depth: int,
                         clamp: bool = False) -> NoiseCube:
        """Creates a resized copy of `src` using trilinear interpolation."""
        from .resample import trilinear_filter
        return trilinear_filter(src, width, height, depth, clamp)

    def __repr__(self) -> str:
        return f"<NoiseCube {self.width}x{self.height}x{self.depth} border={self.border_value}>"
