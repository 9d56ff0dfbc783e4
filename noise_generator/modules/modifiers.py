# noise_generator/modules/modifiers.py

"""
================================================================================
MODIFIER MODULES
================================================================================
Modules with a single source module that reshape its output value: sign and
range adjustments, exponent curves, and control-point mappings.

Data Contract:
---------------
- Inputs: One source module (slot 0) plus kind-specific parameters.
- Outputs: evaluate(x, y, z) -> float, a function of the source's output
  at the same point.
- Side Effects: None.
================================================================================
"""
import bisect
import math

from .. import config as DEFAULTS
from ..errors import InvalidParameterError
from ..noise import cubic_interp, ieee_pow, linear
from .base import Module


class Abs(Module):
    """Outputs the absolute value of the source module."""
    source_module_count = 1

    def evaluate(self, x, y, z):
        return abs(self._source(0).evaluate(x, y, z))


class Invert(Module):
    """Negates the output of the source module."""
    source_module_count = 1

    def evaluate(self, x, y, z):
        return -self._source(0).evaluate(x, y, z)


class Clamp(Module):
    """Clamps the output of the source module to [lower_bound, upper_bound]."""
    source_module_count = 1

    def __init__(self, source: Module = None,
                 lower_bound: float = DEFAULTS.DEFAULT_CLAMP_LOWER_BOUND,
                 upper_bound: float = DEFAULTS.DEFAULT_CLAMP_UPPER_BOUND):
        super().__init__(*([source] if source is not None else []))
        self.set_bounds(lower_bound, upper_bound)

    @property
    def lower_bound(self) -> float:
        return self._lower_bound

    @property
    def upper_bound(self) -> float:
        return self._upper_bound

    def set_bounds(self, lower_bound: float, upper_bound: float) -> None:
        """Sets both bounds at once; the lower bound may not exceed the upper."""
        lower_bound = float(lower_bound)
        upper_bound = float(upper_bound)
        if lower_bound > upper_bound:
            raise InvalidParameterError(
                f"Clamp lower bound {lower_bound} is greater than upper bound {upper_bound}."
            )
        self._lower_bound = lower_bound
        self._upper_bound = upper_bound

    def evaluate(self, x, y, z):
        value = self._source(0).evaluate(x, y, z)
        if value < self._lower_bound:
            return self._lower_bound
        elif value > self._upper_bound:
            return self._upper_bound
        return value


class ScaleBias(Module):
    """Outputs source * scale + bias."""
    source_module_count = 1

    def __init__(self, source: Module = None,
                 scale: float = DEFAULTS.DEFAULT_SCALE,
                 bias: float = DEFAULTS.DEFAULT_BIAS):
        super().__init__(*([source] if source is not None else []))
        self.scale = float(scale)
        self.bias = float(bias)

    def evaluate(self, x, y, z):
        return self._source(0).evaluate(x, y, z) * self.scale + self.bias


class Exponent(Module):
    """
    Applies an exponential curve to the source output. The value is mapped
    from [-1, 1] to [0, 1], raised to `exponent`, and mapped back.
    """
    source_module_count = 1

    def __init__(self, source: Module = None, exponent: float = DEFAULTS.DEFAULT_EXPONENT):
        super().__init__(*([source] if source is not None else []))
        self.exponent = float(exponent)

    def evaluate(self, x, y, z):
        value = self._source(0).evaluate(x, y, z)
        return ieee_pow(abs((value + 1.0) / 2.0), self.exponent) * 2.0 - 1.0


class _ControlPointModule(Module):
    """Keeps a sorted list of unique control point inputs."""
    source_module_count = 1
    min_control_points = 1

    def __init__(self, source: Module = None):
        super().__init__(*([source] if source is not None else []))
        self._inputs = []
        self._outputs = []

    @property
    def control_point_count(self) -> int:
        return len(self._inputs)

    def _insert(self, input_value: float, output_value: float) -> None:
        index = bisect.bisect_left(self._inputs, input_value)
        if index < len(self._inputs) and self._inputs[index] == input_value:
            raise InvalidParameterError(
                f"{type(self).__name__} already has a control point at {input_value}."
            )
        self._inputs.insert(index, input_value)
        self._outputs.insert(index, output_value)

    def clear_control_points(self) -> None:
        self._inputs = []
        self._outputs = []

    def validate(self) -> None:
        super().validate()
        if len(self._inputs) < self.min_control_points:
            raise InvalidParameterError(
                f"{type(self).__name__} needs at least {self.min_control_points} control points, "
                f"has {len(self._inputs)}."
            )


class Curve(_ControlPointModule):
    """
    Maps the source output onto an arbitrary curve defined by control points
    (input -> output), using cubic interpolation between them. Values
    outside the control point range extrapolate along the nearest segment.
    """
    min_control_points = DEFAULTS.CURVE_MIN_CONTROL_POINTS

    @property
    def control_points(self) -> list:
        """(input, output) pairs sorted by input."""
        return list(zip(self._inputs, self._outputs))

    def add_control_point(self, input_value: float, output_value: float) -> None:
        """Adds a control point; inputs must be unique."""
        self._insert(float(input_value), float(output_value))

    def evaluate(self, x, y, z):
        self.validate()
        value = self._source(0).evaluate(x, y, z)
        inputs = self._inputs
        outputs = self._outputs
        last = len(inputs) - 1

        # Index of the first control point whose input exceeds the value.
        index_pos = bisect.bisect_right(inputs, value)
        if index_pos < 1:
            index_pos = 1
        elif index_pos > last:
            index_pos = last

        # Four points around the segment, clamped to the array ends.
        index0 = max(index_pos - 2, 0)
        index1 = index_pos - 1
        index2 = index_pos
        index3 = min(index_pos + 1, last)

        input0 = inputs[index1]
        input1 = inputs[index2]
        alpha = (value - input0) / (input1 - input0)

        return cubic_interp(
            outputs[index0], outputs[index1], outputs[index2], outputs[index3], alpha
        )


class Terrace(_ControlPointModule):
    """
    Maps the source output onto a terrace-forming curve. Between two control
    points the output rises slowly and then sharply, so the flat "steps" sit
    at the control point values. With `invert_terraces` the curve shape is
    mirrored inside every step.
    """
    min_control_points = DEFAULTS.TERRACE_MIN_CONTROL_POINTS

    def __init__(self, source: Module = None, invert_terraces: bool = False):
        super().__init__(source)
        self.invert_terraces = bool(invert_terraces)

    @property
    def control_points(self) -> list:
        return list(self._inputs)

    def add_control_point(self, value: float) -> None:
        self._insert(float(value), float(value))

    def make_control_points(self, count: int) -> None:
        """Replaces the control points with `count` equally spaced ones across [-1, 1]."""
        if count < 2:
            raise InvalidParameterError(f"Terrace needs at least 2 control points, got {count}.")
        self.clear_control_points()
        step = 2.0 / (count - 1)
        for i in range(count):
            self.add_control_point(-1.0 + i * step)

    def evaluate(self, x, y, z):
        self.validate()
        value = self._source(0).evaluate(x, y, z)
        if math.isnan(value):
            return value
        points = self._inputs
        last = len(points) - 1

        index_pos = bisect.bisect_right(points, value)
        index0 = min(max(index_pos - 1, 0), last)
        index1 = min(max(index_pos, 0), last)

        # Outside the control point range the output is the nearest point.
        if index0 == index1:
            return points[index1]

        value0 = points[index0]
        value1 = points[index1]
        alpha = (value - value0) / (value1 - value0)
        if self.invert_terraces:
            alpha = 1.0 - alpha
            value0, value1 = value1, value0

        alpha *= alpha
        return linear(value0, value1, alpha)
