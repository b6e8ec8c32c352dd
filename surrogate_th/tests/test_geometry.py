"""
Unit tests for pin bundle geometry.
"""

import numpy as np
import pytest

from surrogate_th.exceptions import ConfigurationError
from surrogate_th.geometry import AxialGrid, ChannelKind, GeometryModel, RadialGrid


VALID = dict(
    n_pins_x=2, n_pins_y=2, pin_pitch=1.26, clad_inner_radius=0.50,
    clad_outer_radius=0.55, pellet_radius=0.40, mass_flowrate=1.0,
    n_fuel_rings=2, n_clad_rings=1,
)


class TestPinLayout:
    """Test pin center placement."""

    def test_pin_count(self, geometry):
        """Pin count is n_pins_x times n_pins_y."""
        assert geometry.n_pins == 4
        assert geometry.pin_centers.shape == (4, 2)

    def test_centers_2x2(self, geometry):
        """Row 0 is the top row; pins are half a pitch from the origin."""
        h = 0.63
        expected = [[-h, h], [h, h], [-h, -h], [h, -h]]
        np.testing.assert_allclose(geometry.pin_centers, expected)

    @pytest.mark.parametrize("nx,ny", [(1, 1), (3, 2), (17, 17), (4, 7)])
    def test_symmetric_about_origin(self, nx, ny):
        """Pin centers are symmetric about the origin."""
        geom = GeometryModel(**{**VALID, "n_pins_x": nx, "n_pins_y": ny})
        assert len(geom.pin_centers) == nx * ny
        np.testing.assert_allclose(geom.pin_centers.mean(axis=0), [0.0, 0.0], atol=1e-12)
        # Mirror image of every center is also a center
        mirrored = -geom.pin_centers[::-1]
        np.testing.assert_allclose(mirrored, geom.pin_centers, atol=1e-12)

    def test_pin_index(self, geometry):
        """Pin index is row-major over the lattice."""
        assert geometry.pin_index(1, 0) == 2
        with pytest.raises(IndexError):
            geometry.pin_index(2, 0)

    def test_pin_centers_read_only(self, geometry):
        """Pin centers cannot be modified."""
        with pytest.raises(ValueError):
            geometry.pin_centers[0, 0] = 1.0


class TestChannelPartition:
    """Test coolant channel areas and flow split."""

    def test_channel_count(self, geometry):
        """A bundle has (nx + 1) x (ny + 1) channels."""
        assert geometry.n_channels == 9
        assert geometry.channel_areas.shape == (9,)

    def test_example_bundle_areas(self, geometry):
        """Channel areas of the 2x2 example bundle."""
        interior = 1.26 ** 2 - np.pi * 0.55 ** 2
        kinds = [geometry.channel_kind(r, c) for r in range(3) for c in range(3)]
        areas = geometry.channel_areas

        corners = [i for i, k in enumerate(kinds) if k == ChannelKind.CORNER]
        edges = [i for i, k in enumerate(kinds) if k == ChannelKind.EDGE]
        interiors = [i for i, k in enumerate(kinds) if k == ChannelKind.INTERIOR]

        assert corners == [0, 2, 6, 8]
        assert edges == [1, 3, 5, 7]
        assert interiors == [4]
        np.testing.assert_allclose(areas[corners], interior / 4.0)
        np.testing.assert_allclose(areas[edges], interior / 2.0)
        assert areas[4] == pytest.approx(interior)

    def test_corner_area_exact(self, geometry):
        """Corner and edge areas must match the exact quarter/half values."""
        interior = geometry.interior_flow_area
        assert geometry.channel_areas[0] == interior / 4.0
        assert geometry.channel_areas[1] == interior / 2.0

    def test_total_flow_area(self, geometry):
        """Total flow area is the sum of channel areas."""
        # 2x2 bundle: 4 quarters + 4 halves + 1 full = 4 interior areas
        assert geometry.total_flow_area == pytest.approx(4.0 * geometry.interior_flow_area)

    @pytest.mark.parametrize("nx,ny,flow", [(1, 1, 0.3), (2, 2, 1.0), (5, 3, 12.5), (17, 17, 80.0)])
    def test_flow_fractions_sum_to_one(self, nx, ny, flow):
        """Flow fractions sum to one."""
        geom = GeometryModel(**{**VALID, "n_pins_x": nx, "n_pins_y": ny, "mass_flowrate": flow})
        assert geom.flow_fractions.sum() == pytest.approx(1.0, abs=1e-9)
        assert geom.channel_flowrates.sum() == pytest.approx(flow, rel=1e-9)

    def test_flowrate_proportional_to_area(self, geometry):
        """Channel flow rate is proportional to channel area."""
        np.testing.assert_allclose(
            geometry.channel_flowrates / geometry.channel_areas,
            geometry.mass_flowrate / geometry.total_flow_area,
        )

    def test_single_pin_all_corners(self):
        """A single pin has four corner channels."""
        geom = GeometryModel(**{**VALID, "n_pins_x": 1, "n_pins_y": 1})
        assert geom.n_channels == 4
        assert all(geom.channel_kind(r, c) == ChannelKind.CORNER for r in range(2) for c in range(2))

    def test_channel_index_bounds(self, geometry):
        """Channel lookups outside the lattice raise IndexError."""
        assert geometry.channel_index(2, 2) == 8
        with pytest.raises(IndexError):
            geometry.channel_index(3, 0)
        with pytest.raises(IndexError):
            geometry.channel_kind(0, -1)


class TestRadialGrid:
    """Test fuel and clad ring boundaries."""

    def test_endpoints_exact(self, geometry):
        """Radial grids hit the pellet and clad radii exactly."""
        assert geometry.r_grid_fuel[0] == 0.0
        assert geometry.r_grid_fuel[-1] == 0.40
        assert geometry.r_grid_clad[0] == 0.50
        assert geometry.r_grid_clad[-1] == 0.55

    def test_lengths(self, geometry):
        """Radial grids have one more point than rings."""
        assert len(geometry.r_grid_fuel) == 3
        assert len(geometry.r_grid_clad) == 2
        assert geometry.n_rings == 3

    @pytest.mark.parametrize("n_fuel,n_clad", [(1, 1), (2, 1), (10, 3), (25, 5)])
    def test_strictly_increasing(self, n_fuel, n_clad):
        """Radial grids are strictly increasing."""
        grid = RadialGrid.equally_spaced(0.41, 0.42, 0.475, n_fuel, n_clad)
        assert np.all(np.diff(grid.r_fuel) > 0)
        assert np.all(np.diff(grid.r_clad) > 0)
        assert grid.r_fuel[-1] < grid.r_clad[0]

    def test_equal_spacing(self):
        """Radial grid points are equally spaced."""
        grid = RadialGrid.equally_spaced(0.4, 0.5, 0.6, 4, 2)
        np.testing.assert_allclose(np.diff(grid.r_fuel), 0.1)
        np.testing.assert_allclose(np.diff(grid.r_clad), 0.05)

    def test_ring_bounds(self, geometry):
        """Ring bounds pair consecutive radii across fuel and clad."""
        bounds = geometry.radial.ring_bounds()
        np.testing.assert_allclose(bounds, [[0.0, 0.2], [0.2, 0.4], [0.5, 0.55]])
        np.testing.assert_allclose(
            geometry.radial.ring_areas(),
            np.pi * (bounds[:, 1] ** 2 - bounds[:, 0] ** 2),
        )


class TestAxialGrid:
    """Test axial plane boundaries."""

    def test_n_axial(self):
        """Axial levels are one fewer than boundaries."""
        assert AxialGrid.from_boundaries([0.0, 1.0, 2.0, 3.0]).n_axial == 3

    def test_single_level(self):
        """Two boundaries give one axial level."""
        assert AxialGrid.from_boundaries([0.0, 10.0]).n_axial == 1

    @pytest.mark.parametrize("z", [[], [1.0], [0.0, 0.0], [0.0, 2.0, 1.0]])
    def test_invalid(self, z):
        """Short or non-increasing boundaries are rejected."""
        with pytest.raises(ConfigurationError):
            AxialGrid.from_boundaries(z)


class TestPreconditions:
    """Test construction-time validation."""

    @pytest.mark.parametrize("override", [
        {"clad_inner_radius": 0.0},
        {"clad_outer_radius": 0.50},
        {"pellet_radius": 0.50},
        {"pellet_radius": 0.0},
        {"pellet_radius": -0.1},
        {"n_fuel_rings": 0},
        {"n_clad_rings": 0},
        {"n_pins_x": 0},
        {"n_pins_y": -1},
        {"pin_pitch": 1.10},
        {"mass_flowrate": 0.0},
    ])
    def test_violations_raise(self, override):
        """Each precondition violation raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            GeometryModel(**{**VALID, **override})

    def test_touching_rods_rejected(self):
        """Rods that touch are rejected as overlapping."""
        with pytest.raises(ConfigurationError, match="overlap"):
            GeometryModel(**{**VALID, "pin_pitch": 2 * 0.55})
