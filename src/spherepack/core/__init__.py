"""Distribution parsing, sampling and container geometry."""

from .containers import Container, Cuboid, Cylinder, cube_from_volume, cylinder_from_volume
from .distribution import RawDistribution, SphereDistribution, load_distribution, parse, validate
from .errors import (
    ConfigError,
    ContainerConstructionError,
    DistributionError,
    InvalidProportionsError,
    NonPositiveRadiusError,
    PackingError,
    ParseError,
    SamplerConstructionError,
    SpherePackError,
    SpherePackIOError,
)
from .models import SimOutput, Sphere, SphereType
from .sampler import WeightedRadiusSampler

__all__ = [
    "Container",
    "Cuboid",
    "Cylinder",
    "cube_from_volume",
    "cylinder_from_volume",
    "RawDistribution",
    "SphereDistribution",
    "load_distribution",
    "parse",
    "validate",
    "ConfigError",
    "ContainerConstructionError",
    "DistributionError",
    "InvalidProportionsError",
    "NonPositiveRadiusError",
    "PackingError",
    "ParseError",
    "SamplerConstructionError",
    "SpherePackError",
    "SpherePackIOError",
    "SimOutput",
    "Sphere",
    "SphereType",
    "WeightedRadiusSampler",
]
