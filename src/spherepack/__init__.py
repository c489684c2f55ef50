"""
spherepack — packing efficiency estimates for discrete sphere size distributions.

Public API:
    from spherepack.core.distribution import parse, validate, load_distribution
    from spherepack.core.sampler import WeightedRadiusSampler
    from spherepack.core.containers import Cylinder, Cuboid
    from spherepack.algorithms.engine import PackingEngine, PackingResult
    from spherepack.runner.simulation import simulate, run_file
"""

__version__ = "0.1.0"
