# noise_generator/modules/combiners.py

"""
================================================================================
COMBINER MODULES
================================================================================
Two-source modules that combine the outputs of their sources arithmetically.

Data Contract:
---------------
- Inputs: Two source modules (slots 0 and 1).
- Outputs: evaluate(x, y, z) -> float.
- Side Effects: None.
================================================================================
"""
from ..noise import ieee_pow
from .base import Module


class _Combiner(Module):
    source_module_count = 2

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


class Add(_Combiner):
    def evaluate(self, x, y, z):
        return self._source(0).evaluate(x, y, z) + self._source(1).evaluate(x, y, z)


class Subtract(_Combiner):
    """Outputs source0 - source1."""

    def evaluate(self, x, y, z):
        return self._source(0).evaluate(x, y, z) - self._source(1).evaluate(x, y, z)


class Multiply(_Combiner):
    def evaluate(self, x, y, z):
        return self._source(0).evaluate(x, y, z) * self._source(1).evaluate(x, y, z)


class Max(_Combiner):
    def evaluate(self, x, y, z):
        return max(self._source(0).evaluate(x, y, z), self._source(1).evaluate(x, y, z))


class Min(_Combiner):
    def evaluate(self, x, y, z):
        return min(self._source(0).evaluate(x, y, z), self._source(1).evaluate(x, y, z))


class Power(_Combiner):
    """
    Raises source0 to the power of source1. Follows IEEE 754: a negative base
    with a fractional exponent yields nan rather than raising.
    """

    def evaluate(self, x, y, z):
        return ieee_pow(self._source(0).evaluate(x, y, z), self._source(1).evaluate(x, y, z))
