# noise_generator/modules/base.py

"""
================================================================================
NOISE MODULE BASE
================================================================================
This module defines the `Module` base class shared by every node of a noise
graph, and the graph walk used to validate a graph before a bulk build.

A module calculates an output value from a three-dimensional input point.
Generator modules compute that value directly; every other kind combines or
reshapes the values of its source modules. Each kind declares a fixed
number of ordered source slots ("arity") and must have every slot filled
before it can be evaluated.

Data Contract:
---------------
- Inputs:
    - Source modules, assigned by slot index.
    - Kind-specific parameters (frequency, seed, bounds, ...).
- Outputs:
    - evaluate(x, y, z) -> float.
- Side Effects: None. A module never modifies its source modules. The only
  module that mutates state while evaluating is `Cache`, and only its own.
- Invariants:
    - A module never references itself directly.
    - Sources are not owned: the caller keeps the graph alive. Cycles are
      the caller's responsibility; `validate_graph(check_cycles=True)`
      detects them on demand.
================================================================================
"""
from __future__ import annotations

from ..errors import CycleError, NoModuleError, SelfReferenceError, SourceIndexError


class Module:
    """
    Abstract base class for noise modules. Subclasses set
    `source_module_count` and implement `evaluate`.
    """
    source_module_count = 0

    def __init__(self, *sources: Module):
        if len(sources) > self.source_module_count:
            raise SourceIndexError(
                f"{type(self).__name__} takes {self.source_module_count} source modules, "
                f"{len(sources)} were given."
            )
        self._source_modules: list[Module | None] = [None] * self.source_module_count
        for index, source in enumerate(sources):
            self.set_source_module(index, source)

    @property
    def source_modules(self) -> tuple:
        """The source slots in index order; unset slots are None."""
        return tuple(self._source_modules)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.source_module_count:
            raise SourceIndexError(
                f"Source index {index} is out of range for {type(self).__name__} "
                f"(arity {self.source_module_count})."
            )

    def get_source_module(self, index: int) -> Module:
        """Returns the module in the given slot."""
        self._check_index(index)
        module = self._source_modules[index]
        if module is None:
            raise NoModuleError(f"{type(self).__name__} has no source module at index {index}.")
        return module

    def set_source_module(self, index: int, module: Module) -> None:
        """
        Connects a source module to the given slot, replacing the previous
        occupant of that slot only.
        """
        self._check_index(index)
        if module is self:
            raise SelfReferenceError(f"{type(self).__name__} cannot be its own source module.")
        if not isinstance(module, Module):
            raise TypeError(f"Source modules must be Module instances, got {type(module).__name__}.")
        self._source_modules[index] = module

    def _source(self, index: int) -> Module:
        # Hot path: the index is always valid here, only the slot may be empty.
        module = self._source_modules[index]
        if module is None:
            raise NoModuleError(f"{type(self).__name__} has no source module at index {index}.")
        return module

    def validate(self) -> None:
        """
        Raises a configuration error if this module cannot be evaluated.
        Kinds with extra requirements extend this check.
        """
        for index, module in enumerate(self._source_modules):
            if module is None:
                raise NoModuleError(f"{type(self).__name__} has no source module at index {index}.")

    def evaluate(self, x: float, y: float, z: float) -> float:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} sources={self.source_module_count}>"


def validate_graph(root: Module, check_cycles: bool = False) -> int:
    """
    Validates every module reachable from `root` and returns how many
    distinct modules the graph holds. Shared subgraphs are visited once, so
    the walk terminates even on a cyclic graph; with `check_cycles` a cycle
    raises CycleError instead of being skipped.
    """
    if not isinstance(root, Module):
        raise TypeError(f"Expected a Module, got {type(root).__name__}.")

    visited = set()
    on_path = set()

    def _walk(module: Module) -> None:
        key = id(module)
        if key in on_path:
            if check_cycles:
                raise CycleError(f"{type(module).__name__} is reachable from its own sources.")
            return
        if key in visited:
            return
        visited.add(key)
        on_path.add(key)
        module.validate()
        for source in module.source_modules:
            _walk(source)
        on_path.discard(key)

    _walk(root)
    return len(visited)
