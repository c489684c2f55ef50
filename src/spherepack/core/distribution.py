"""
Sphere distribution parsing and validation.

Input is a JSON array of records:

    [{"name": "5_micron_Al", "radius": 5.0, "proportion": 66},
     {"name": "400_AP", "radius": 400, "proportion": 34}]

Parsing only checks structure and types (``ParseError``). Validation then
checks values, radius first:
  1. every radius > 0                    (``NonPositiveRadiusError``)
  2. proportions sum to exactly 100      (``InvalidProportionsError``)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import pydantic
from pydantic import TypeAdapter

from spherepack.core.errors import (
    InvalidProportionsError,
    NonPositiveRadiusError,
    ParseError,
    SpherePackIOError,
)
from spherepack.core.models import SphereType

logger = logging.getLogger(__name__)

REQUIRED_PROPORTION_TOTAL = 100

_RECORDS = TypeAdapter(list[SphereType])


@dataclass(frozen=True)
class RawDistribution:
    """Sphere types as parsed, not yet validated."""

    spheres: tuple[SphereType, ...]

    def __iter__(self) -> Iterator[SphereType]:
        return iter(self.spheres)

    def __len__(self) -> int:
        return len(self.spheres)

    @property
    def proportion_total(self) -> int:
        return sum(s.proportion for s in self.spheres)


@dataclass(frozen=True)
class SphereDistribution:
    """
    A validated sphere distribution.

    Only built by :func:`validate`; every radius is > 0 and the proportions
    sum to exactly 100.
    """

    spheres: tuple[SphereType, ...]

    def __iter__(self) -> Iterator[SphereType]:
        return iter(self.spheres)

    def __len__(self) -> int:
        return len(self.spheres)

    def weighted_pairs(self) -> list[tuple[float, int]]:
        """(radius, proportion) pairs in input order."""
        return [(s.radius, s.proportion) for s in self.spheres]

    def avg_volume(self) -> float:
        """Proportion-weighted average volume of a single sphere."""
        return sum(s.volume * s.fraction for s in self.spheres)

    def avg_surface_area(self) -> float:
        """Proportion-weighted average surface area of a single sphere."""
        return sum(s.surface_area * s.fraction for s in self.spheres)

    def sa_to_vol(self) -> float:
        """
        Average volume over average surface area of the population.

        Named after the output field; the ratio is volume / area.
        """
        return self.avg_volume() / self.avg_surface_area()


def parse(text: str | bytes) -> RawDistribution:
    """
    Parse JSON text into a RawDistribution.

    Raises:
        ParseError: Invalid JSON, a non-array top level, or any record with a
            missing field or a wrong type. No partial result is returned.
    """
    try:
        records = _RECORDS.validate_json(text)
    except (pydantic.ValidationError, UnicodeDecodeError) as exc:
        raise ParseError(f"failed to parse sphere distribution: {exc}") from exc

    for record in records:
        logger.debug("Parsed sphere type %s: radius=%s proportion=%s",
                     record.name, record.radius, record.proportion)
    return RawDistribution(spheres=tuple(records))


def validate(raw: RawDistribution) -> SphereDistribution:
    """
    Validate a parsed distribution.

    Raises:
        NonPositiveRadiusError: Some radius is <= 0. Checked first.
        InvalidProportionsError: Proportions do not sum to exactly 100.
    """
    if not all(s.radius > 0.0 for s in raw.spheres):
        raise NonPositiveRadiusError()

    total = raw.proportion_total
    if total != REQUIRED_PROPORTION_TOTAL:
        raise InvalidProportionsError(total)

    return SphereDistribution(spheres=raw.spheres)


def parse_distribution(text: str | bytes) -> SphereDistribution:
    """Parse and validate in one step."""
    return validate(parse(text))


def load_distribution(path: Path | str) -> SphereDistribution:
    """
    Read, parse and validate a distribution file.

    Raises:
        SpherePackIOError: The file cannot be read.
        ParseError, DistributionError: See :func:`parse` and :func:`validate`.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SpherePackIOError(f"failed to open input file {path}: {exc}") from exc

    distribution = parse_distribution(data)
    logger.info("Loaded %d sphere types from %s", len(distribution), path)
    return distribution
