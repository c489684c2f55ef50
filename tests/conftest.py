"""Shared fixtures for the spherepack test suite."""

import logging
import os
import sys

import numpy as np
import pytest

# Allow running the tests without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from spherepack.algorithms.engine import PackingEngine, PackingResult
from spherepack.core.distribution import parse, validate
from spherepack.core.models import Sphere


VALID = """
[
  {
    "name": "5_micron_Al",
    "radius": 5.0,
    "proportion": 66
  },
  {
    "name": "400_AP",
    "radius": 400,
    "proportion": 34
  }
]"""

INVALID = """
[
  {
    "name": "5_micron_Al",
    "radius": 5.0,
    "proportion": 66
  },
  {
    "name": "400_AP",
    "radius": 400,
    "proportion": 32
  }
]"""

MALFORMED = """
[
  {
    "name": "5_micron_Al",
    "radius": 5.0,
  },
  {
    "name": "400_AP",
    "radius": 400,
    "proportion": 32
  }
]"""

NEG_RADIUS = """
[
  {
    "name": "5_micron_Al",
    "radius": -5.0,
    "proportion": 100
  }
]
"""

UNIFORM = '[{"name": "unit", "radius": 1.0, "proportion": 100}]'


class FixedEngine(PackingEngine):
    """Engine returning a preset number of unit spheres, for orchestration tests."""

    name = "fixed"

    def __init__(self, count: int = 3):
        self.count = count
        self.calls = []

    def attempt_packing(self, container, sampler, rng):
        self.calls.append((container, sampler))
        spheres = tuple(
            Sphere(center=(0.0, 0.0, float(i)), radius=sampler.draw(rng))
            for i in range(self.count)
        )
        return PackingResult(spheres=spheres, container_volume=container.volume())


@pytest.fixture
def valid_distribution():
    return validate(parse(VALID))


@pytest.fixture
def uniform_distribution():
    return validate(parse(UNIFORM))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fixed_engine():
    return FixedEngine()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the command line entry points."""
    yield
    logger = logging.getLogger("spherepack")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
