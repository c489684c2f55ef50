"""Tests for container sizing, the orchestrator and the bundled packer."""

import json
import math

import numpy as np
import pytest

from conftest import FixedEngine
from spherepack.algorithms.engine import PackingEngine, PackingResult
from spherepack.algorithms.random_sequential import RandomSequentialPacker
from spherepack.core.containers import Cuboid, Cylinder, cube_from_volume
from spherepack.core.distribution import parse, validate
from spherepack.core.errors import ContainerConstructionError, PackingError, SpherePackIOError
from spherepack.core.models import SimOutput, Sphere, SphereType
from spherepack.core.sampler import WeightedRadiusSampler
from spherepack.runner.config import ContainerConfig, PackingConfig, SimulationConfig
from spherepack.runner.simulation import (
    build_container,
    container_volume_for,
    simulate,
    write_output,
)


@pytest.fixture
def cuboid_config():
    return SimulationConfig(container=ContainerConfig(shape="cuboid"))


class FailingEngine(PackingEngine):
    name = "failing"

    def __init__(self):
        self.error = PackingError("failed to pack shape")

    def attempt_packing(self, container, sampler, rng):
        raise self.error


class TestSizing:
    def test_container_volume_is_twice_target_sphere_volume(self, valid_distribution):
        expected = 2.0 * 1000 * valid_distribution.avg_volume()
        assert container_volume_for(valid_distribution) == pytest.approx(expected)

    def test_custom_target_and_headroom(self, uniform_distribution):
        volume = container_volume_for(uniform_distribution, target_sphere_count=10, volume_headroom=3.0)
        assert volume == pytest.approx(3.0 * 10 * 4.0 / 3.0 * math.pi)

    def test_huge_radius_volume_overflows_to_inf(self):
        sphere = SphereType(name="a", radius=1e103, proportion=100)
        assert sphere.volume == math.inf

    @pytest.mark.parametrize("radius", [1e103, 1e101])
    def test_out_of_range_volume_rejected(self, radius):
        distribution = validate(parse(
            f'[{{"name": "a", "radius": {radius}, "proportion": 100}}]'
        ))
        with pytest.raises(ContainerConstructionError):
            container_volume_for(distribution)
        with pytest.raises(ContainerConstructionError):
            simulate(distribution, engine=FixedEngine())

    def test_vanishing_radius_rejected(self):
        distribution = validate(parse('[{"name": "a", "radius": 1e-200, "proportion": 100}]'))
        with pytest.raises(ContainerConstructionError):
            simulate(distribution, engine=FixedEngine())

    def test_default_container_is_cylinder_with_aspect_8(self, valid_distribution):
        container = build_container(valid_distribution, SimulationConfig())
        assert isinstance(container, Cylinder)
        assert container.height == pytest.approx(8.0 * container.radius)
        assert container.volume() == pytest.approx(container_volume_for(valid_distribution))

    def test_cylinder_radius_formula(self, valid_distribution):
        volume = container_volume_for(valid_distribution)
        container = build_container(valid_distribution, SimulationConfig())
        assert container.radius == pytest.approx((volume / (math.pi * 8.0)) ** (1 / 3))

    def test_cuboid_is_cube(self, valid_distribution, cuboid_config):
        container = build_container(valid_distribution, cuboid_config)
        assert isinstance(container, Cuboid)
        hx, hy, hz = container.half_extents
        assert hx == hy == hz
        assert 2 * hx == pytest.approx(container_volume_for(valid_distribution) ** (1 / 3))


class TestSimulate:
    def test_cylinder_output_has_no_sphere_count(self, valid_distribution, fixed_engine, rng):
        output = simulate(valid_distribution, engine=fixed_engine, rng=rng)
        assert output.sphere_count is None
        assert "sphere_count" not in output.to_dict()

    def test_cuboid_output_reports_sphere_count(self, valid_distribution, cuboid_config, rng):
        output = simulate(valid_distribution, config=cuboid_config, engine=FixedEngine(count=7), rng=rng)
        assert output.sphere_count == 7

    def test_sa_to_vol_comes_from_distribution(self, valid_distribution, fixed_engine, rng):
        output = simulate(valid_distribution, engine=fixed_engine, rng=rng)
        expected = valid_distribution.avg_volume() / valid_distribution.avg_surface_area()
        assert output.sa_to_vol == pytest.approx(expected)

    def test_volume_fraction_from_engine_result(self, uniform_distribution, cuboid_config, rng):
        engine = FixedEngine(count=4)
        output = simulate(uniform_distribution, config=cuboid_config, engine=engine, rng=rng)
        container = engine.calls[0][0]
        assert output.volume_fraction == pytest.approx(4 * (4 / 3 * math.pi) / container.volume())

    def test_engine_receives_sampler_for_distribution(self, valid_distribution, fixed_engine, rng):
        simulate(valid_distribution, engine=fixed_engine, rng=rng)
        _, sampler = fixed_engine.calls[0]
        assert isinstance(sampler, WeightedRadiusSampler)
        assert list(sampler.choices) == [5.0, 400.0]

    def test_packing_error_propagates_unchanged(self, valid_distribution, rng):
        engine = FailingEngine()
        with pytest.raises(PackingError) as info:
            simulate(valid_distribution, engine=engine, rng=rng)
        assert info.value is engine.error

    def test_seeded_runs_repeat(self, uniform_distribution):
        config = SimulationConfig(
            container=ContainerConfig(shape="cuboid"),
            packing=PackingConfig(max_spheres=40),
            seed=5,
        )
        assert simulate(uniform_distribution, config=config) == simulate(uniform_distribution, config=config)


class TestRandomSequentialPacker:
    def test_packs_without_overlap(self, rng):
        container = cube_from_volume(2000.0)
        sampler = WeightedRadiusSampler([(1.0, 50), (2.0, 50)])
        result = RandomSequentialPacker(max_spheres=60).attempt_packing(container, sampler, rng)

        assert 0 < result.sphere_count <= 60
        assert all(container.contains(s) for s in result.spheres)
        centers = np.array([s.center for s in result.spheres])
        radii = np.array([s.radius for s in result.spheres])
        for i in range(len(radii)):
            d = np.linalg.norm(centers[i + 1:] - centers[i], axis=1)
            assert (d >= radii[i + 1:] + radii[i] - 1e-9).all()

    def test_volume_fraction_in_unit_interval(self, rng):
        container = cube_from_volume(500.0)
        sampler = WeightedRadiusSampler([(1.0, 100)])
        result = RandomSequentialPacker(max_spheres=500).attempt_packing(container, sampler, rng)
        assert 0.0 < result.volume_fraction < 0.64

    def test_stops_at_max_spheres(self, rng):
        container = cube_from_volume(10_000.0)
        sampler = WeightedRadiusSampler([(0.5, 100)])
        result = RandomSequentialPacker(max_spheres=25).attempt_packing(container, sampler, rng)
        assert result.sphere_count == 25

    def test_sphere_larger_than_container_fails(self, rng):
        container = Cuboid((1.0, 1.0, 1.0))
        sampler = WeightedRadiusSampler([(5.0, 100)])
        packer = RandomSequentialPacker(max_attempts=5, max_consecutive_failures=3)
        with pytest.raises(PackingError):
            packer.attempt_packing(container, sampler, rng)

    def test_legacy_cylinder_cannot_be_packed(self, rng):
        container = Cylinder((0.0, 0.0, 0.0), 10.0, 80.0, containment="legacy")
        sampler = WeightedRadiusSampler([(1.0, 100)])
        packer = RandomSequentialPacker(max_attempts=5, max_consecutive_failures=3)
        with pytest.raises(PackingError):
            packer.attempt_packing(container, sampler, rng)

    def test_geometric_cylinder_packs(self, rng):
        container = Cylinder((0.0, 0.0, 0.0), 10.0, 80.0)
        sampler = WeightedRadiusSampler([(1.0, 100)])
        result = RandomSequentialPacker(max_spheres=30).attempt_packing(container, sampler, rng)
        assert result.sphere_count == 30
        assert all(container.contains(s) for s in result.spheres)


class TestPackingResult:
    def test_volume_fraction(self):
        spheres = (Sphere((0.0, 0.0, 0.0), 1.0), Sphere((5.0, 0.0, 0.0), 1.0))
        result = PackingResult(spheres=spheres, container_volume=100.0)
        assert result.volume_fraction == pytest.approx(2 * 4 / 3 * math.pi / 100.0)
        assert result.sphere_count == 2


class TestWriteOutput:
    def test_writes_json(self, tmp_path):
        path = tmp_path / "out.json"
        write_output(SimOutput(0.3, 1.5, 12), path)
        assert json.loads(path.read_text()) == {"volume_fraction": 0.3, "sa_to_vol": 1.5, "sphere_count": 12}
        assert list(tmp_path.iterdir()) == [path]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SpherePackIOError):
            write_output(SimOutput(0.3, 1.5), tmp_path / "nope" / "out.json")
