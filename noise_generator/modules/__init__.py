# noise_generator/modules/__init__.py

# The catalogue of noise module kinds, re-exported as one namespace.

from .base import Module, validate_graph
from .cache import Cache
from .combiners import Add, Max, Min, Multiply, Power, Subtract
from .generators import (
    Billow,
    Cell,
    CellType,
    Checkerboard,
    Const,
    Cylinders,
    Perlin,
    RidgedMulti,
    Spheres,
    White,
)
from .modifiers import Abs, Clamp, Curve, Exponent, Invert, ScaleBias, Terrace
from .selectors import Blend, Select
from .transformers import Displace, RotatePoint, ScalePoint, TranslatePoint, Turbulence

__all__ = [
    "Module",
    "validate_graph",
    "Const",
    "Perlin",
    "Billow",
    "RidgedMulti",
    "Cell",
    "CellType",
    "White",
    "Checkerboard",
    "Cylinders",
    "Spheres",
    "Abs",
    "Invert",
    "Clamp",
    "ScaleBias",
    "Curve",
    "Terrace",
    "Exponent",
    "Add",
    "Subtract",
    "Multiply",
    "Max",
    "Min",
    "Power",
    "Blend",
    "Select",
    "RotatePoint",
    "ScalePoint",
    "TranslatePoint",
    "Turbulence",
    "Displace",
    "Cache",
]
