# noise_generator/modules/selectors.py

"""
================================================================================
SELECTOR MODULES
================================================================================
Three-source modules where a control module decides how the outputs of two
source modules are mixed.

Data Contract:
---------------
- Inputs:
    - Slot 0: source0, slot 1: source1, slot 2: control.
    - Select: bounds and an edge falloff.
- Outputs: evaluate(x, y, z) -> float.
- Side Effects: None.
- Invariants: Select's edge falloff never exceeds half of the selection
  range, so the two transition curves cannot overlap.
================================================================================
"""
from .. import config as DEFAULTS
from ..errors import InvalidParameterError
from ..noise import linear, s_curve3
from .base import Module


class _Selector(Module):
    source_module_count = 3

    @property
    def source0(self) -> Module:
        return self.get_source_module(0)

    @source0.setter
    def source0(self, module: Module) -> None:
        self.set_source_module(0, module)

    @property
    def source1(self) -> Module:
        return self.get_source_module(1)

    @source1.setter
    def source1(self, module: Module) -> None:
        self.set_source_module(1, module)

    @property
    def control(self) -> Module:
        return self.get_source_module(2)

    @control.setter
    def control(self, module: Module) -> None:
        self.set_source_module(2, module)


class Blend(_Selector):
    """
    Linear blend of source0 and source1 weighted by the control output:
    -1 gives source0, +1 gives source1.
    """

    def evaluate(self, x, y, z):
        v0 = self._source(0).evaluate(x, y, z)
        v1 = self._source(1).evaluate(x, y, z)
        alpha = (self._source(2).evaluate(x, y, z) + 1.0) / 2.0
        return linear(v0, v1, alpha)


class Select(_Selector):
    """
    Outputs source1 where the control value lies inside [lower_bound,
    upper_bound] and source0 elsewhere. A positive edge falloff smooths the
    transition at both bounds with an S-curve.
    """

    def __init__(self, source0: Module = None, source1: Module = None, control: Module = None,
                 lower_bound: float = DEFAULTS.DEFAULT_SELECT_LOWER_BOUND,
                 upper_bound: float = DEFAULTS.DEFAULT_SELECT_UPPER_BOUND,
                 edge_falloff: float = DEFAULTS.DEFAULT_EDGE_FALLOFF):
        super().__init__()
        for index, module in enumerate((source0, source1, control)):
            if module is not None:
                self.set_source_module(index, module)
        self._edge_falloff = 0.0
        self.set_bounds(lower_bound, upper_bound)
        self.edge_falloff = edge_falloff

    @property
    def lower_bound(self) -> float:
        return self._lower_bound

    @property
    def upper_bound(self) -> float:
        return self._upper_bound

    def set_bounds(self, lower_bound: float, upper_bound: float) -> None:
        """Sets the selection range and re-clamps the edge falloff to it."""
        lower_bound = float(lower_bound)
        upper_bound = float(upper_bound)
        if lower_bound > upper_bound:
            raise InvalidParameterError(
                f"Select lower bound {lower_bound} is greater than upper bound {upper_bound}."
            )
        self._lower_bound = lower_bound
        self._upper_bound = upper_bound
        self.edge_falloff = self._edge_falloff

    @property
    def edge_falloff(self) -> float:
        return self._edge_falloff

    @edge_falloff.setter
    def edge_falloff(self, value: float) -> None:
        value = float(value)
        if value < 0.0:
            raise InvalidParameterError(f"Edge falloff must not be negative, got {value}.")
        bound_size = self._upper_bound - self._lower_bound
        self._edge_falloff = bound_size / 2.0 if value + value > bound_size else value

    def evaluate(self, x, y, z):
        control_value = self._source(2).evaluate(x, y, z)
        lower = self._lower_bound
        upper = self._upper_bound
        falloff = self._edge_falloff

        if falloff <= 0.0:
            if control_value < lower or control_value > upper:
                return self._source(0).evaluate(x, y, z)
            return self._source(1).evaluate(x, y, z)

        if control_value < lower - falloff:
            return self._source(0).evaluate(x, y, z)
        elif control_value < lower + falloff:
            # Rising edge: source0 -> source1.
            lower_curve = lower - falloff
            upper_curve = lower + falloff
            alpha = s_curve3((control_value - lower_curve) / (upper_curve - lower_curve))
            return linear(self._source(0).evaluate(x, y, z), self._source(1).evaluate(x, y, z), alpha)
        elif control_value < upper - falloff:
            return self._source(1).evaluate(x, y, z)
        elif control_value < upper + falloff:
            # Falling edge: source1 -> source0.
            lower_curve = upper - falloff
            upper_curve = upper + falloff
            alpha = s_curve3((control_value - lower_curve) / (upper_curve - lower_curve))
            return linear(self._source(1).evaluate(x, y, z), self._source(0).evaluate(x, y, z), alpha)
        return self._source(0).evaluate(x, y, z)
