# noise_generator/errors.py

class NoiseError(Exception):
    """Base error for the noise module system."""


class NoModuleError(NoiseError):
    """Raised when a required source module slot has not been set."""


class SourceIndexError(NoiseError, IndexError):
    """Raised when a source module index is outside a module's arity."""


class SelfReferenceError(NoiseError, ValueError):
    """Raised when a module is assigned as its own source module."""


class InvalidParameterError(NoiseError, ValueError):
    """Raised when a module or builder receives an invalid parameter."""


class CycleError(NoiseError):
    """Raised by the opt-in graph check when a module graph contains a cycle."""


class BuildCancelledError(NoiseError):
    """Raised when a build is cancelled between rows or slices."""
