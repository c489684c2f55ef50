"""Weighted random selection of sphere radii."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from spherepack.core.distribution import SphereDistribution
from spherepack.core.errors import SamplerConstructionError


class WeightedRadiusSampler:
    """
    Draws radii with probability proportional to their integer weights.

    The sampler keeps no draw history; the random source is passed in on
    every call so callers control seeding.

    Args:
        items: (radius, weight) pairs. Weights are non-negative integers and
               must not all be zero.
    """

    def __init__(self, items: Iterable[tuple[float, int]]):
        pairs = list(items)
        if not pairs:
            raise SamplerConstructionError("no radii to sample from")

        self.choices = np.array([radius for radius, _ in pairs], dtype=np.float64)
        self.weights = np.array([weight for _, weight in pairs], dtype=np.int64)

        if (self.weights < 0).any():
            raise SamplerConstructionError("weights must be non-negative")
        self.total_weight = int(self.weights.sum())
        if self.total_weight == 0:
            raise SamplerConstructionError("all weights are zero")

        self._cumulative = np.cumsum(self.weights)

    @classmethod
    def from_distribution(cls, distribution: SphereDistribution) -> "WeightedRadiusSampler":
        return cls(distribution.weighted_pairs())

    @property
    def probabilities(self) -> np.ndarray:
        """Selection probability of each radius, in input order."""
        return self.weights / self.total_weight

    @property
    def max_radius(self) -> float:
        return float(self.choices[self.weights > 0].max())

    def _index(self, ticket):
        # ticket in [0, total); zero-weight entries never own a ticket
        return np.searchsorted(self._cumulative, ticket, side="right")

    def draw(self, rng: np.random.Generator) -> float:
        """Draw a single radius."""
        ticket = rng.integers(self.total_weight)
        return float(self.choices[int(self._index(ticket))])

    def draw_many(self, rng: np.random.Generator, n: int) -> np.ndarray:
        """Draw *n* independent radii."""
        tickets = rng.integers(self.total_weight, size=n)
        return self.choices[self._index(tickets)]
