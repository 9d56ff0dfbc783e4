# noise_generator/modules/cache.py

"""
================================================================================
CACHE MODULE
================================================================================
A single-entry memo in front of one source module. When the same point is
requested twice in a row (common when one subgraph feeds several consumers),
the second request is answered without re-evaluating the source.

Data Contract:
---------------
- Inputs: One source module (slot 0).
- Outputs: evaluate(x, y, z) -> the source's value at (x, y, z).
- Side Effects: Overwrites its own memo on every miss.
- Concurrency: The memo is not synchronized. When several threads share one
  Cache instance they may see a stale miss or recompute redundantly, but a
  returned value always belongs to the requested point: the memo is
  replaced as one tuple, so a reader never pairs one point with another
  point's value.
================================================================================
"""
from .base import Module


class Cache(Module):
    source_module_count = 1

    def __init__(self, source: Module = None):
        self._memo = None
        super().__init__(*([source] if source is not None else []))

    def set_source_module(self, index: int, module: Module) -> None:
        super().set_source_module(index, module)
        self._memo = None

    def evaluate(self, x, y, z):
        memo = self._memo
        if memo is not None and memo[0] == x and memo[1] == y and memo[2] == z:
            return memo[3]
        value = self._source(0).evaluate(x, y, z)
        self._memo = (x, y, z, value)
        return value
