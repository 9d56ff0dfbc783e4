"""
Pytest configuration and fixtures for the noise_generator test suite.

This file contains shared fixtures and test doubles used across the unit
and integration tests.
"""
import os
import sys

import pytest

from noise_generator.modules import Module


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add the project root to the Python path so preview_noise is importable.
    package_root = os.path.dirname(os.path.dirname(__file__))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)


class CountingModule(Module):
    """Generator test double: returns a fixed value and records its calls."""

    def __init__(self, value=0.0):
        super().__init__()
        self.value = value
        self.calls = 0
        self.points = []

    def evaluate(self, x, y, z):
        self.calls += 1
        self.points.append((x, y, z))
        return self.value


class CoordinateModule(Module):
    """Generator test double that returns x + 10y + 100z."""

    def evaluate(self, x, y, z):
        return x + 10.0 * y + 100.0 * z


@pytest.fixture
def counting_module():
    """A fresh call-counting constant source."""
    return CountingModule(0.25)


@pytest.fixture
def make_const():
    """Factory for constant sources with a given value."""
    def _make(value):
        return CountingModule(value)
    return _make


@pytest.fixture
def coordinate_module():
    return CoordinateModule()
