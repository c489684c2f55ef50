"""Packing engine interface and result type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from spherepack.core.containers import Container
from spherepack.core.models import Sphere
from spherepack.core.sampler import WeightedRadiusSampler


@dataclass(frozen=True)
class PackingResult:
    """Spheres placed by an engine and the volume they were placed in."""

    spheres: tuple[Sphere, ...]
    container_volume: float

    @property
    def sphere_count(self) -> int:
        return len(self.spheres)

    @property
    def volume_fraction(self) -> float:
        """Total sphere volume / container volume."""
        return sum(s.volume for s in self.spheres) / self.container_volume


class PackingEngine(ABC):
    """
    Places spheres into a container.

    Engines only rely on ``container.contains``, ``container.volume`` and
    ``container.bounds``, and draw every radius from ``sampler``.
    """

    name: str = "engine"

    @abstractmethod
    def attempt_packing(
        self,
        container: Container,
        sampler: WeightedRadiusSampler,
        rng: np.random.Generator,
    ) -> PackingResult:
        """
        Pack the container.

        Raises:
            PackingError: The container could not be packed.
        """
