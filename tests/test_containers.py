"""Tests for cylinder and cuboid containers."""

import math

import numpy as np
import pytest

from spherepack.core.containers import (
    ORIGIN,
    Cuboid,
    Cylinder,
    cube_from_volume,
    cylinder_from_volume,
)
from spherepack.core.errors import ContainerConstructionError
from spherepack.core.models import Sphere


@pytest.fixture
def cylinder():
    """r=10, h=40 standing on the origin; centre at z=40, interior z in [20, 60]."""
    return Cylinder(ORIGIN, radius=10.0, height=40.0)


class TestCylinderConstruction:
    @pytest.mark.parametrize("radius, height", [(0.0, 10.0), (10.0, 0.0), (-1.0, 10.0), (1.0, -3.0)])
    def test_non_positive_dimensions(self, radius, height):
        with pytest.raises(ContainerConstructionError):
            Cylinder(ORIGIN, radius, height)

    def test_unknown_containment_mode(self):
        with pytest.raises(ContainerConstructionError):
            Cylinder(ORIGIN, 1.0, 1.0, containment="loose")

    def test_center_offset_by_height(self):
        cyl = Cylinder((1.0, 2.0, 3.0), radius=2.0, height=5.0)
        assert cyl.center == (1.0, 2.0, 8.0)

    def test_volume(self, cylinder):
        assert cylinder.volume() == pytest.approx(math.pi * 100.0 * 40.0)

    def test_bounds(self, cylinder):
        lower, upper = cylinder.bounds()
        np.testing.assert_allclose(lower, [-10.0, -10.0, 20.0])
        np.testing.assert_allclose(upper, [10.0, 10.0, 60.0])


class TestCylinderGeometricContainment:
    def test_sphere_at_center(self, cylinder):
        assert cylinder.contains(Sphere((0.0, 0.0, 40.0), 2.0))

    def test_touching_wall_is_inside(self, cylinder):
        assert cylinder.contains(Sphere((8.0, 0.0, 40.0), 2.0))

    def test_crossing_wall(self, cylinder):
        assert not cylinder.contains(Sphere((8.5, 0.0, 40.0), 2.0))

    def test_vertical_offset_does_not_shrink_radius(self, cylinder):
        assert cylinder.contains(Sphere((7.0, 0.0, 55.0), 2.0))

    def test_above_top(self, cylinder):
        assert not cylinder.contains(Sphere((0.0, 0.0, 59.0), 2.0))

    def test_below_bottom(self, cylinder):
        assert not cylinder.contains(Sphere((0.0, 0.0, 21.0), 2.0))

    def test_sphere_wider_than_cylinder(self, cylinder):
        assert not cylinder.contains(Sphere((0.0, 0.0, 40.0), 12.0))


class TestCylinderLegacyContainment:
    def test_small_centred_sphere_rejected(self):
        cyl = Cylinder(ORIGIN, 10.0, 40.0, containment="legacy")
        assert not cyl.contains(Sphere((0.0, 0.0, 40.0), 2.0))

    def test_oversized_sphere_far_from_center_rejected(self):
        cyl = Cylinder(ORIGIN, 10.0, 40.0, containment="legacy")
        assert not cyl.contains(Sphere((0.0, 0.0, 5.0), 12.0))

    def test_literal_predicate_can_hold(self):
        # Only a sphere larger than the container, sitting low and near the
        # centre in 3D, satisfies every clause.
        cyl = Cylinder(ORIGIN, 1.0, 1.0, containment="legacy")
        # centre z=1.0, window [0.5, 1.5]; sphere r=3 at z=0.9 -> top 3.9 >= 1.5
        assert not cyl.contains(Sphere((0.0, 0.0, 0.9), 3.0))
        wide = Cylinder(ORIGIN, 1.0, 10.0, containment="legacy")
        # centre z=10, window [5, 15]; r=4 at z=8: 12<15, 4<5, dist 2 <= 3
        assert wide.contains(Sphere((0.0, 0.0, 8.0), 4.0))

    def test_legacy_mode_logs_warning(self, caplog):
        with caplog.at_level("WARNING", logger="spherepack"):
            Cylinder(ORIGIN, 1.0, 1.0, containment="legacy")
        assert "legacy containment" in caplog.text


class TestCuboid:
    @pytest.mark.parametrize("extents", [(0.0, 1.0, 1.0), (1.0, -1.0, 1.0), (1.0, 1.0, 0.0)])
    def test_non_positive_extents(self, extents):
        with pytest.raises(ContainerConstructionError):
            Cuboid(extents)

    def test_wrong_number_of_extents(self):
        with pytest.raises(ContainerConstructionError):
            Cuboid((1.0, 1.0))

    def test_volume(self):
        assert Cuboid((1.0, 2.0, 3.0)).volume() == pytest.approx(48.0)

    def test_contains(self):
        box = Cuboid((5.0, 5.0, 5.0))
        assert box.contains(Sphere((0.0, 0.0, 0.0), 5.0))
        assert box.contains(Sphere((3.0, -3.0, 3.0), 2.0))
        assert not box.contains(Sphere((3.5, 0.0, 0.0), 2.0))
        assert not box.contains(Sphere((0.0, 0.0, -4.0), 1.5))

    def test_offset_center(self):
        box = Cuboid((1.0, 1.0, 1.0), center=(10.0, 0.0, 0.0))
        assert box.contains(Sphere((10.0, 0.0, 0.0), 1.0))
        assert not box.contains(Sphere((0.0, 0.0, 0.0), 0.5))


class TestSizing:
    def test_cube_from_volume(self):
        cube = cube_from_volume(1000.0)
        assert cube.half_extents == pytest.approx((5.0, 5.0, 5.0))
        assert cube.volume() == pytest.approx(1000.0)

    def test_cylinder_from_volume(self):
        cyl = cylinder_from_volume(5000.0, aspect_ratio=8.0)
        assert cyl.height / cyl.radius == pytest.approx(8.0)
        assert cyl.volume() == pytest.approx(5000.0)

    def test_cylinder_from_volume_passes_containment(self):
        cyl = cylinder_from_volume(5000.0, aspect_ratio=8.0, containment="legacy")
        assert cyl.containment == "legacy"

    @pytest.mark.parametrize("volume", [0.0, -1.0])
    def test_non_positive_volume(self, volume):
        with pytest.raises(ContainerConstructionError):
            cube_from_volume(volume)
        with pytest.raises(ContainerConstructionError):
            cylinder_from_volume(volume, 8.0)


class TestNonFiniteDimensions:
    @pytest.mark.parametrize("radius, height", [(math.inf, 1.0), (1.0, math.inf), (math.nan, 1.0)])
    def test_cylinder(self, radius, height):
        with pytest.raises(ContainerConstructionError):
            Cylinder(ORIGIN, radius, height)

    def test_cuboid(self):
        with pytest.raises(ContainerConstructionError):
            Cuboid((1.0, math.inf, 1.0))

    def test_sizing_from_infinite_volume(self):
        with pytest.raises(ContainerConstructionError):
            cube_from_volume(math.inf)
        with pytest.raises(ContainerConstructionError):
            cylinder_from_volume(math.inf, 8.0)
        with pytest.raises(ContainerConstructionError):
            cylinder_from_volume(1000.0, math.inf)
