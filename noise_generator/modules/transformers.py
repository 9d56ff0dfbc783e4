# noise_generator/modules/transformers.py

"""
================================================================================
TRANSFORMER MODULES
================================================================================
Modules that move the input point before sampling their source module. The
returned value is passed through unchanged; only *where* the source is
sampled changes.

Data Contract:
---------------
- Inputs:
    - Slot 0: the module being transformed.
    - Displace only: slots 1-3 supply the x, y and z displacement.
    - Kind-specific parameters (angles, scales, offsets, turbulence power).
- Outputs: evaluate(x, y, z) -> source.evaluate(x', y', z').
- Side Effects: None.
================================================================================
"""
import math

from .. import config as DEFAULTS
from .base import Module
from .generators import Perlin


class RotatePoint(Module):
    """
    Rotates the input point around the origin before sampling the source.
    Angles are in degrees, applied in the order y, x, z.
    """
    source_module_count = 1

    def __init__(self, source: Module = None,
                 x_angle: float = 0.0, y_angle: float = 0.0, z_angle: float = 0.0):
        super().__init__(*([source] if source is not None else []))
        self.set_angles(x_angle, y_angle, z_angle)

    @property
    def angles(self) -> tuple:
        return self._x_angle, self._y_angle, self._z_angle

    def set_angles(self, x_angle: float, y_angle: float, z_angle: float) -> None:
        """Sets the three rotation angles and rebuilds the rotation matrix."""
        self._x_angle = float(x_angle)
        self._y_angle = float(y_angle)
        self._z_angle = float(z_angle)

        x_cos = math.cos(math.radians(self._x_angle))
        y_cos = math.cos(math.radians(self._y_angle))
        z_cos = math.cos(math.radians(self._z_angle))
        x_sin = math.sin(math.radians(self._x_angle))
        y_sin = math.sin(math.radians(self._y_angle))
        z_sin = math.sin(math.radians(self._z_angle))

        self._x1 = y_sin * x_sin * z_sin + y_cos * z_cos
        self._y1 = x_cos * z_sin
        self._z1 = y_sin * z_cos - y_cos * x_sin * z_sin
        self._x2 = y_sin * x_sin * z_cos - y_cos * z_sin
        self._y2 = x_cos * z_cos
        self._z2 = -y_cos * x_sin * z_cos - y_sin * z_sin
        self._x3 = -y_sin * x_cos
        self._y3 = x_sin
        self._z3 = y_cos * x_cos

    def evaluate(self, x, y, z):
        nx = self._x1 * x + self._y1 * y + self._z1 * z
        ny = self._x2 * x + self._y2 * y + self._z2 * z
        nz = self._x3 * x + self._y3 * y + self._z3 * z
        return self._source(0).evaluate(nx, ny, nz)


class ScalePoint(Module):
    """Multiplies each input coordinate by its scale factor."""
    source_module_count = 1

    def __init__(self, source: Module = None,
                 x_scale: float = 1.0, y_scale: float = 1.0, z_scale: float = 1.0):
        super().__init__(*([source] if source is not None else []))
        self.x_scale = float(x_scale)
        self.y_scale = float(y_scale)
        self.z_scale = float(z_scale)

    def evaluate(self, x, y, z):
        return self._source(0).evaluate(x * self.x_scale, y * self.y_scale, z * self.z_scale)


class TranslatePoint(Module):
    """Adds a fixed offset to each input coordinate."""
    source_module_count = 1

    def __init__(self, source: Module = None,
                 x_translation: float = 0.0, y_translation: float = 0.0, z_translation: float = 0.0):
        super().__init__(*([source] if source is not None else []))
        self.x_translation = float(x_translation)
        self.y_translation = float(y_translation)
        self.z_translation = float(z_translation)

    def evaluate(self, x, y, z):
        return self._source(0).evaluate(
            x + self.x_translation, y + self.y_translation, z + self.z_translation
        )


class Turbulence(Module):
    """
    Randomly displaces the input point with three internal Perlin noise
    functions, one per axis, then samples the source there.

    `power` scales the displacement, `frequency` sets how quickly it changes
    and `roughness` is the octave count of the internal Perlin modules.
    """
    source_module_count = 1

    # Per distortion module, the (x, y, z) offset of its sample point. Keeps
    # the three distortion fields from lining up.
    DISTORT_OFFSETS = (
        (12414.0 / 65536.0, 65124.0 / 65536.0, 31337.0 / 65536.0),
        (26519.0 / 65536.0, 18128.0 / 65536.0, 60493.0 / 65536.0),
        (53820.0 / 65536.0, 11213.0 / 65536.0, 44845.0 / 65536.0),
    )

    def __init__(self, source: Module = None,
                 frequency: float = DEFAULTS.DEFAULT_TURBULENCE_FREQUENCY,
                 power: float = DEFAULTS.DEFAULT_TURBULENCE_POWER,
                 roughness: int = DEFAULTS.DEFAULT_TURBULENCE_ROUGHNESS,
                 seed: int = DEFAULTS.DEFAULT_SEED):
        super().__init__(*([source] if source is not None else []))
        self.power = float(power)
        self._x_distort = Perlin(frequency=frequency, octave_count=roughness, seed=seed)
        self._y_distort = Perlin(frequency=frequency, octave_count=roughness, seed=seed + 1)
        self._z_distort = Perlin(frequency=frequency, octave_count=roughness, seed=seed + 2)

    @property
    def frequency(self) -> float:
        return self._x_distort.frequency

    @frequency.setter
    def frequency(self, value: float) -> None:
        for distort in (self._x_distort, self._y_distort, self._z_distort):
            distort.frequency = float(value)

    @property
    def roughness(self) -> int:
        return self._x_distort.octave_count

    @roughness.setter
    def roughness(self, value: int) -> None:
        for distort in (self._x_distort, self._y_distort, self._z_distort):
            distort.octave_count = value

    @property
    def seed(self) -> int:
        return self._x_distort.seed

    @seed.setter
    def seed(self, value: int) -> None:
        self._x_distort.seed = int(value)
        self._y_distort.seed = int(value) + 1
        self._z_distort.seed = int(value) + 2

    def evaluate(self, x, y, z):
        x_off, y_off, z_off = (
            (x + ox, y + oy, z + oz) for ox, oy, oz in self.DISTORT_OFFSETS
        )

        x_distort = x + self._x_distort.evaluate(*x_off) * self.power
        y_distort = y + self._y_distort.evaluate(*y_off) * self.power
        z_distort = z + self._z_distort.evaluate(*z_off) * self.power

        return self._source(0).evaluate(x_distort, y_distort, z_distort)


class Displace(Module):
    """
    Adds the outputs of three displacement modules (slots 1-3) to the x, y
    and z coordinates before sampling the source module in slot 0.
    """
    source_module_count = 4

    @property
    def x_displace(self) -> Module:
        return self.get_source_module(1)

    @x_displace.setter
    def x_displace(self, module: Module) -> None:
        self.set_source_module(1, module)

    @property
    def y_displace(self) -> Module:
        return self.get_source_module(2)

    @y_displace.setter
    def y_displace(self, module: Module) -> None:
        self.set_source_module(2, module)

    @property
    def z_displace(self) -> Module:
        return self.get_source_module(3)

    @z_displace.setter
    def z_displace(self, module: Module) -> None:
        self.set_source_module(3, module)

    def set_displace_modules(self, x_displace: Module, y_displace: Module, z_displace: Module) -> None:
        self.x_displace = x_displace
        self.y_displace = y_displace
        self.z_displace = z_displace

    def evaluate(self, x, y, z):
        nx = x + self._source(1).evaluate(x, y, z)
        ny = y + self._source(2).evaluate(x, y, z)
        nz = z + self._source(3).evaluate(x, y, z)
        return self._source(0).evaluate(nx, ny, nz)
