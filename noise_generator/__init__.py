# noise_generator/__init__.py

# This file makes 'noise_generator' a Python package and defines its public API:
# the module catalogue, the dense containers, the grid builders and the errors.

from .builders import CubeBuilder, CylinderBuilder, PlaneBuilder, SphereBuilder
from .containers import NoiseCube, NoiseMap
from .errors import (
    BuildCancelledError,
    CycleError,
    InvalidParameterError,
    NoiseError,
    NoModuleError,
    SelfReferenceError,
    SourceIndexError,
)
from .modules import *  # noqa: F401,F403
from .modules import __all__ as _module_names
from .noise import NoiseQuality

__all__ = [
    "NoiseQuality",
    "NoiseMap",
    "NoiseCube",
    "PlaneBuilder",
    "CylinderBuilder",
    "SphereBuilder",
    "CubeBuilder",
    "NoiseError",
    "NoModuleError",
    "SourceIndexError",
    "SelfReferenceError",
    "InvalidParameterError",
    "CycleError",
    "BuildCancelledError",
] + list(_module_names)
