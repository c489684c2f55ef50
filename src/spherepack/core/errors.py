"""
Error taxonomy for the sphere packing pipeline.

Every failure is fail-fast: nothing in the core catches and recovers, the
command line entry points report the message and exit non-zero.

    SpherePackError
    ├── ParseError                 — malformed JSON or sphere records
    ├── DistributionError          — well-formed input with invalid values
    │   ├── NonPositiveRadiusError
    │   └── InvalidProportionsError
    ├── SamplerConstructionError   — degenerate (all-zero) weights
    ├── ContainerConstructionError — non-positive container dimensions
    ├── PackingError               — raised by a packing engine
    ├── SpherePackIOError          — reading/writing boundary files
    └── ConfigError                — bad configuration file or values
"""


class SpherePackError(Exception):
    """Base class for all spherepack errors."""


class ParseError(SpherePackError):
    """Input could not be parsed into sphere records."""


class DistributionError(SpherePackError):
    """Parsed distribution failed validation."""


class NonPositiveRadiusError(DistributionError):
    """At least one sphere type has a radius <= 0."""

    def __init__(self, message: str = "non-positive values for radius are not allowed"):
        super().__init__(message)


class InvalidProportionsError(DistributionError):
    """Proportions do not sum to exactly 100."""

    def __init__(self, total: int):
        self.total = total
        super().__init__(f"invalid proportions: sum is {total}, expected 100")


class SamplerConstructionError(SpherePackError):
    """Weighted sampler cannot be built from the given weights."""


class ContainerConstructionError(SpherePackError):
    """Container dimensions are not strictly positive."""


class PackingError(SpherePackError):
    """The packing engine failed to pack the container."""


class SpherePackIOError(SpherePackError):
    """Reading the input or writing the output file failed."""


class ConfigError(SpherePackError):
    """Configuration file or value is invalid."""
