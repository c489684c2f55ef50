"""
Container sizing and the single-run pipeline.

    validated distribution
        -> container volume  (target count x avg sphere volume x headroom)
        -> container         (cylinder with fixed aspect ratio, or cube)
        -> sampler + engine  -> PackingResult
        -> SimOutput
"""

from __future__ import annotations

import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np

from spherepack.algorithms.engine import PackingEngine
from spherepack.algorithms.random_sequential import RandomSequentialPacker
from spherepack.core.containers import Container, cube_from_volume, cylinder_from_volume
from spherepack.core.distribution import SphereDistribution, load_distribution
from spherepack.core.errors import ContainerConstructionError, SpherePackIOError
from spherepack.core.models import SimOutput
from spherepack.core.sampler import WeightedRadiusSampler
from spherepack.runner.config import PackingConfig, SimulationConfig

logger = logging.getLogger(__name__)


def container_volume_for(
    distribution: SphereDistribution,
    target_sphere_count: int = 1000,
    volume_headroom: float = 2.0,
) -> float:
    """
    Volume needed to hold the target population at 1/headroom packing fraction.

    Raises:
        ContainerConstructionError: The volume is not a positive finite number.
    """
    sphere_volume = distribution.avg_volume() * target_sphere_count
    volume = sphere_volume * volume_headroom
    if not (0.0 < volume < math.inf):
        raise ContainerConstructionError(
            f"container volume {volume} for this distribution is out of range"
        )
    return volume


def build_container(distribution: SphereDistribution, config: SimulationConfig) -> Container:
    """Size the configured container shape for *distribution*."""
    volume = container_volume_for(
        distribution,
        target_sphere_count=config.target_sphere_count,
        volume_headroom=config.volume_headroom,
    )
    if config.container.shape == "cuboid":
        return cube_from_volume(volume)
    return cylinder_from_volume(
        volume,
        aspect_ratio=config.container.aspect_ratio,
        containment=config.container.containment,
    )


def build_engine(packing: PackingConfig) -> PackingEngine:
    return RandomSequentialPacker(
        max_attempts=packing.max_attempts,
        max_consecutive_failures=packing.max_consecutive_failures,
        max_spheres=packing.max_spheres,
    )


def simulate(
    distribution: SphereDistribution,
    config: Optional[SimulationConfig] = None,
    engine: Optional[PackingEngine] = None,
    rng: Optional[np.random.Generator] = None,
) -> SimOutput:
    """
    Pack spheres drawn from *distribution* and report the result.

    Args:
        distribution: Validated sphere distribution.
        config:       Simulation settings (defaults if None).
        engine:       Packing engine (RandomSequentialPacker from config if None).
        rng:          Random source (seeded from config.seed if None).

    Returns:
        SimOutput. ``sphere_count`` is only set for the cuboid container.

    Raises:
        PackingError: Propagated unchanged from the engine.
    """
    config = config or SimulationConfig()
    engine = engine or build_engine(config.packing)
    rng = rng if rng is not None else np.random.default_rng(config.seed)

    container = build_container(distribution, config)
    logger.info("Packing %d sphere types into %r with %s",
                len(distribution), container, engine.name)

    sampler = WeightedRadiusSampler.from_distribution(distribution)
    result = engine.attempt_packing(container, sampler, rng)
    logger.info("Packed %d spheres, volume fraction %.4f",
                result.sphere_count, result.volume_fraction)

    sphere_count = result.sphere_count if config.container.shape == "cuboid" else None
    return SimOutput(
        volume_fraction=float(result.volume_fraction),
        sa_to_vol=distribution.sa_to_vol(),
        sphere_count=sphere_count,
    )


def write_output(output: SimOutput, path: Path | str) -> None:
    """
    Write *output* as JSON.

    The document is serialized first and written to a temporary file in the
    target directory, then renamed over *path*.
    """
    path = Path(path)
    payload = output.to_json()
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as exc:
        raise SpherePackIOError(f"failed to write to output file {path}: {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise SpherePackIOError(f"failed to write to output file {path}: {exc}") from exc


def run_file(
    input_path: Path | str,
    output_path: Path | str,
    config: Optional[SimulationConfig] = None,
    engine: Optional[PackingEngine] = None,
) -> SimOutput:
    """Load a distribution file, simulate, and write the output file."""
    distribution = load_distribution(input_path)
    output = simulate(distribution, config=config, engine=engine)
    write_output(output, output_path)
    logger.info("Wrote results to %s", output_path)
    return output
