"""Core data models for sphere packing simulation."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SphereType(BaseModel):
    """
    One entry of a sphere size distribution, as read from the input file.

    Attributes:
        name:       Free-form label (e.g. "5_micron_Al").
        radius:     Sphere radius. Only checked for positivity at validation.
        proportion: Relative abundance in percent. Stored as 0-255, the
                    distribution as a whole must sum to 100.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(strict=True)
    radius: float = Field(strict=True, allow_inf_nan=False)
    proportion: int = Field(strict=True, ge=0, le=255)

    @property
    def volume(self) -> float:
        """Volume of a single sphere of this type."""
        return 4.0 / 3.0 * math.pi * self.radius * self.radius * self.radius

    @property
    def surface_area(self) -> float:
        """Surface area of a single sphere of this type."""
        return 4.0 * math.pi * self.radius * self.radius

    @property
    def fraction(self) -> float:
        """Proportion as a fraction of 1."""
        return self.proportion / 100.0


@dataclass(frozen=True)
class Sphere:
    """A sphere placed (or proposed) at a position inside a container."""

    center: tuple[float, float, float]
    radius: float

    @property
    def x(self) -> float:
        return self.center[0]

    @property
    def y(self) -> float:
        return self.center[1]

    @property
    def z(self) -> float:
        return self.center[2]

    @property
    def volume(self) -> float:
        return 4.0 / 3.0 * math.pi * self.radius * self.radius * self.radius

    def to_dict(self) -> dict:
        return {"center": list(self.center), "radius": self.radius}


@dataclass(frozen=True)
class SimOutput:
    """
    Result of one packing simulation, written to the output file.

    Attributes:
        volume_fraction: Packing efficiency reported by the engine.
        sa_to_vol:       Weighted average volume / weighted average surface
                         area of the input population.
        sphere_count:    Number of placed spheres. Only reported for the
                         cuboid container.
    """
    volume_fraction: float
    sa_to_vol: float
    sphere_count: Optional[int] = None

    def to_dict(self) -> dict:
        d = {"volume_fraction": self.volume_fraction, "sa_to_vol": self.sa_to_vol}
        if self.sphere_count is not None:
            d["sphere_count"] = self.sphere_count
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
