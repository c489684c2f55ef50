"""
Container shapes that spheres are packed into.

Both shapes implement the same capability used by packing engines:
``contains(sphere) -> bool`` and ``volume() -> float``. ``bounds()`` gives
the axis-aligned box engines propose positions from.

Cylinder containment modes
--------------------------
``geometric`` (default) is a plain inside-the-cylinder test.

``legacy`` reproduces the predicate of the first release of this tool
literally:

    container.radius < sphere.radius
    and sphere.z + sphere.radius < center.z + height / 2
    and sphere.z - sphere.radius < center.z - height / 2
    and |sphere.center - center|^2 <= (container.radius - sphere.radius)^2

The radius comparison is inverted and the lower z bound points the wrong
way, so no sphere smaller than the container is ever accepted. It is kept
only for comparing against results produced by that release.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import ClassVar

import numpy as np

from spherepack.core.errors import ContainerConstructionError
from spherepack.core.models import Sphere

logger = logging.getLogger(__name__)

Point = tuple[float, float, float]
ORIGIN: Point = (0.0, 0.0, 0.0)

CONTAINMENT_MODES = ("geometric", "legacy")


class Container(ABC):
    """A closed region spheres can be packed into."""

    shape: ClassVar[str]
    center: Point

    @abstractmethod
    def contains(self, sphere: Sphere) -> bool:
        """True if *sphere* lies entirely inside the container."""

    @abstractmethod
    def volume(self) -> float:
        """Interior volume."""

    @abstractmethod
    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """(lower, upper) corners of the axis-aligned bounding box."""

    @abstractmethod
    def to_dict(self) -> dict:
        ...


class Cylinder(Container):
    """
    Upright cylinder standing on ``bottom``.

    The center sits ``height`` above the bottom point.

    Args:
        bottom:      Base point.
        radius:      Cylinder radius, > 0.
        height:      Cylinder height, > 0.
        containment: "geometric" or "legacy" (see module docstring).

    Raises:
        ContainerConstructionError: radius or height is not a positive finite number.
    """

    shape = "cylinder"

    def __init__(
        self,
        bottom: Point,
        radius: float,
        height: float,
        containment: str = "geometric",
    ):
        if not (math.isfinite(radius) and math.isfinite(height)):
            raise ContainerConstructionError(
                f"cylinder dimensions must be finite, got radius={radius}, height={height}"
            )
        if not radius > 0.0:
            raise ContainerConstructionError(f"cylinder radius must be > 0, got {radius}")
        if not height > 0.0:
            raise ContainerConstructionError(f"cylinder height must be > 0, got {height}")
        if containment not in CONTAINMENT_MODES:
            raise ContainerConstructionError(
                f"Unknown containment mode: {containment}. Available: {list(CONTAINMENT_MODES)}"
            )

        self.radius = float(radius)
        self.height = float(height)
        self.center: Point = (float(bottom[0]), float(bottom[1]), float(bottom[2]) + self.height)
        self.containment = containment

        if containment == "legacy":
            logger.warning(
                "Cylinder uses the legacy containment predicate; "
                "spheres smaller than the container are always rejected"
            )

    def contains(self, sphere: Sphere) -> bool:
        if self.containment == "legacy":
            return self._contains_legacy(sphere)
        return self._contains_geometric(sphere)

    def _contains_geometric(self, sphere: Sphere) -> bool:
        cx, cy, cz = self.center
        half = self.height / 2.0
        if sphere.radius >= self.radius:
            return False
        if sphere.z + sphere.radius > cz + half or sphere.z - sphere.radius < cz - half:
            return False
        return (sphere.x - cx) ** 2 + (sphere.y - cy) ** 2 <= (self.radius - sphere.radius) ** 2

    def _contains_legacy(self, sphere: Sphere) -> bool:
        cx, cy, cz = self.center
        half = self.height / 2.0
        return (
            self.radius < sphere.radius
            and sphere.z + sphere.radius < cz + half
            and sphere.z - sphere.radius < cz - half
            and (sphere.x - cx) ** 2 + (sphere.y - cy) ** 2 + (sphere.z - cz) ** 2
            <= (self.radius - sphere.radius) ** 2
        )

    def volume(self) -> float:
        return math.pi * self.radius * self.radius * self.height

    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        c = np.array(self.center)
        half = np.array([self.radius, self.radius, self.height / 2.0])
        return c - half, c + half

    def to_dict(self) -> dict:
        return {"shape": self.shape, "radius": self.radius, "height": self.height,
                "center": list(self.center), "containment": self.containment}

    def __repr__(self) -> str:
        return f"Cylinder(r={self.radius:.4g}, h={self.height:.4g}, center={self.center})"


class Cuboid(Container):
    """
    Axis-aligned box given by its half-extents around ``center``.

    Raises:
        ContainerConstructionError: any half-extent is not a positive finite number.
    """

    shape = "cuboid"

    def __init__(self, half_extents: Point, center: Point = ORIGIN):
        if len(half_extents) != 3:
            raise ContainerConstructionError("cuboid needs exactly three half-extents")
        if not all(0.0 < h < math.inf for h in half_extents):
            raise ContainerConstructionError(
                f"cuboid half-extents must be positive and finite, got {tuple(half_extents)}"
            )
        self.half_extents: Point = tuple(float(h) for h in half_extents)
        self.center: Point = tuple(float(c) for c in center)

    def contains(self, sphere: Sphere) -> bool:
        return all(
            abs(p - c) + sphere.radius <= h
            for p, c, h in zip(sphere.center, self.center, self.half_extents)
        )

    def volume(self) -> float:
        hx, hy, hz = self.half_extents
        return 8.0 * hx * hy * hz

    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        c = np.array(self.center)
        h = np.array(self.half_extents)
        return c - h, c + h

    def to_dict(self) -> dict:
        return {"shape": self.shape, "half_extents": list(self.half_extents),
                "center": list(self.center)}

    def __repr__(self) -> str:
        return f"Cuboid(half_extents={self.half_extents}, center={self.center})"


def cylinder_from_volume(
    volume: float,
    aspect_ratio: float,
    containment: str = "geometric",
) -> Cylinder:
    """
    Cylinder of the given volume and height/radius ratio, based at the origin.

    Solves volume = pi * r^2 * (aspect * r) for r.
    """
    if not (0.0 < volume < math.inf) or not (0.0 < aspect_ratio < math.inf):
        raise ContainerConstructionError(
            f"cannot size cylinder from volume={volume}, aspect_ratio={aspect_ratio}"
        )
    radius = (volume / (math.pi * aspect_ratio)) ** (1.0 / 3.0)
    return Cylinder(ORIGIN, radius, radius * aspect_ratio, containment=containment)


def cube_from_volume(volume: float) -> Cuboid:
    """Cube of the given volume centered at the origin."""
    if not (0.0 < volume < math.inf):
        raise ContainerConstructionError(f"cannot size cube from volume={volume}")
    half = volume ** (1.0 / 3.0) / 2.0
    return Cuboid((half, half, half))
