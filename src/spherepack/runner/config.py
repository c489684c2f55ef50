"""
Simulation configuration.

All tuneable parameters for one run live in ``SimulationConfig``. Values come
from the dataclass defaults, optionally overridden by a YAML file:

    target_sphere_count: 1000
    volume_headroom: 2.0
    seed: 42
    container:
      shape: cuboid            # cylinder | cuboid
      aspect_ratio: 8.0        # cylinder height / radius
      containment: geometric   # geometric | legacy
    packing:
      max_attempts: 200
      max_consecutive_failures: 50
      max_spheres: 5000
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from spherepack.core.containers import CONTAINMENT_MODES
from spherepack.core.errors import ConfigError

CONTAINER_SHAPES = ("cylinder", "cuboid")


def _from_section(cls, data: Any, section: str):
    """Build a config dataclass from a mapping, rejecting unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"'{section}' must be a mapping, got {type(data).__name__}")
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown keys in '{section}': {sorted(unknown)}")
    try:
        return cls(**data)
    except TypeError as exc:
        raise ConfigError(f"Invalid '{section}' section: {exc}") from exc


def _require_positive(section: str, **values: Any) -> None:
    for key, value in values.items():
        if (isinstance(value, bool) or not isinstance(value, (int, float))
                or not math.isfinite(value) or not value > 0):
            raise ConfigError(f"{section}.{key} must be a positive number, got {value!r}")


def _require_positive_int(section: str, **values: Any) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"{section}.{key} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class ContainerConfig:
    """
    Container shape selection.

    Attributes:
        shape:        "cylinder" or "cuboid" (cube).
        aspect_ratio: Cylinder height / radius.
        containment:  Cylinder containment predicate, "geometric" or "legacy".
    """
    shape: str = "cylinder"
    aspect_ratio: float = 8.0
    containment: str = "geometric"

    def __post_init__(self):
        if self.shape not in CONTAINER_SHAPES:
            raise ConfigError(
                f"Unknown container shape: {self.shape}. Available: {list(CONTAINER_SHAPES)}"
            )
        if self.containment not in CONTAINMENT_MODES:
            raise ConfigError(
                f"Unknown containment mode: {self.containment}. "
                f"Available: {list(CONTAINMENT_MODES)}"
            )
        _require_positive("container", aspect_ratio=self.aspect_ratio)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "ContainerConfig":
        return _from_section(cls, d, "container")


@dataclass(frozen=True)
class PackingConfig:
    """Limits for the bundled random sequential packer."""
    max_attempts: int = 200
    max_consecutive_failures: int = 50
    max_spheres: int = 5000

    def __post_init__(self):
        _require_positive_int(
            "packing",
            max_attempts=self.max_attempts,
            max_consecutive_failures=self.max_consecutive_failures,
            max_spheres=self.max_spheres,
        )

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "PackingConfig":
        return _from_section(cls, d, "packing")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything needed to size a container and pack it.

    Attributes:
        container:           Shape selection.
        packing:             Engine limits.
        target_sphere_count: Nominal population the container is sized for.
        volume_headroom:     Container volume / target sphere volume (2.0
                             aims at a 50% packing fraction).
        seed:                Seed for the random source, None for fresh entropy.
    """
    container: ContainerConfig = field(default_factory=ContainerConfig)
    packing: PackingConfig = field(default_factory=PackingConfig)
    target_sphere_count: int = 1000
    volume_headroom: float = 2.0
    seed: Optional[int] = None

    def __post_init__(self):
        _require_positive_int("simulation", target_sphere_count=self.target_sphere_count)
        _require_positive("simulation", volume_headroom=self.volume_headroom)
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigError(f"seed must be an integer or null, got {self.seed!r}")

    def with_overrides(
        self,
        shape: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> "SimulationConfig":
        """Copy with command line overrides applied."""
        config = self
        if shape is not None:
            config = dataclasses.replace(
                config, container=dataclasses.replace(config.container, shape=shape)
            )
        if seed is not None:
            config = dataclasses.replace(config, seed=seed)
        return config

    def to_dict(self) -> dict:
        return {
            "container": self.container.to_dict(),
            "packing": self.packing.to_dict(),
            "target_sphere_count": self.target_sphere_count,
            "volume_headroom": self.volume_headroom,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "SimulationConfig":
        if d is None:
            return cls()
        if not isinstance(d, dict):
            raise ConfigError(f"configuration must be a mapping, got {type(d).__name__}")
        d = dict(d)
        container = ContainerConfig.from_dict(d.pop("container", None))
        packing = PackingConfig.from_dict(d.pop("packing", None))
        unknown = set(d) - {"target_sphere_count", "volume_headroom", "seed"}
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(container=container, packing=packing, **d)


def load_config(path: Path | str) -> SimulationConfig:
    """
    Load a SimulationConfig from a YAML file.

    Raises:
        ConfigError: The file cannot be read, is not valid YAML, or holds
            invalid values.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    return SimulationConfig.from_dict(data)
