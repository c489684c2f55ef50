"""Random sequential addition packing."""

from __future__ import annotations

import logging

import numpy as np

from spherepack.algorithms.engine import PackingEngine, PackingResult
from spherepack.core.containers import Container
from spherepack.core.errors import PackingError
from spherepack.core.models import Sphere
from spherepack.core.sampler import WeightedRadiusSampler

logger = logging.getLogger(__name__)


class RandomSequentialPacker(PackingEngine):
    """
    Random sequential addition (RSA) packer.

    For each new sphere a radius is drawn from the sampler and random centres
    are proposed inside the container's bounding box. The first proposal that
    is inside the container and does not overlap any placed sphere is kept.
    Spheres never move once placed.

    Stops when ``max_spheres`` are placed or after ``max_consecutive_failures``
    radii in a row could not be placed within ``max_attempts`` proposals.
    """

    name = "random_sequential"

    def __init__(
        self,
        max_attempts: int = 200,
        max_consecutive_failures: int = 50,
        max_spheres: int = 5000,
    ):
        self.max_attempts = max_attempts
        self.max_consecutive_failures = max_consecutive_failures
        self.max_spheres = max_spheres

    def attempt_packing(
        self,
        container: Container,
        sampler: WeightedRadiusSampler,
        rng: np.random.Generator,
    ) -> PackingResult:
        lower, upper = container.bounds()
        centers = np.empty((self.max_spheres, 3), dtype=np.float64)
        radii = np.empty(self.max_spheres, dtype=np.float64)
        placed: list[Sphere] = []
        failures = 0

        while len(placed) < self.max_spheres and failures < self.max_consecutive_failures:
            radius = sampler.draw(rng)
            sphere = self._place_one(container, radius, lower, upper,
                                     centers[:len(placed)], radii[:len(placed)], rng)
            if sphere is None:
                failures += 1
                continue

            n = len(placed)
            centers[n] = sphere.center
            radii[n] = sphere.radius
            placed.append(sphere)
            failures = 0

            if len(placed) % 500 == 0:
                logger.debug("Placed %d spheres", len(placed))

        if not placed:
            raise PackingError(f"failed to pack shape: no sphere fits in {container!r}")

        logger.debug("Stopped after %d spheres (%d consecutive failures)",
                     len(placed), failures)
        return PackingResult(spheres=tuple(placed), container_volume=container.volume())

    def _place_one(
        self,
        container: Container,
        radius: float,
        lower: np.ndarray,
        upper: np.ndarray,
        centers: np.ndarray,
        radii: np.ndarray,
        rng: np.random.Generator,
    ) -> Sphere | None:
        """Try up to max_attempts random centres for one sphere."""
        lo = lower + radius
        hi = upper - radius
        if (lo > hi).any():
            return None

        for _ in range(self.max_attempts):
            point = rng.uniform(lo, hi)
            candidate = Sphere(center=(float(point[0]), float(point[1]), float(point[2])),
                               radius=radius)
            if not container.contains(candidate):
                continue
            if len(radii):
                gap = np.sum((centers - point) ** 2, axis=1)
                if (gap < (radii + radius) ** 2).any():
                    continue
            return candidate
        return None
