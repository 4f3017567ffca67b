"""
Tests for conservation laws and run diagnostics.

Validates mass conservation across full timesteps, agreement between the
streaming pass and the independent diagnostics, and the Reynolds number.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from d2q9_bgk.boundary import ObstacleMask, create_channel_walls, create_cylinder_mask
from d2q9_bgk.diagnostics import average_velocity, calc_reynolds, reynolds_number, total_density
from d2q9_bgk.errors import ConfigurationError
from d2q9_bgk.field import LatticeField
from d2q9_bgk.parameters import ParameterSet
from d2q9_bgk.simulator import Simulator


def make_params(nx=32, ny=16, max_iters=100, accel=0.005, omega=1.7, density=0.1):
    return ParameterSet(nx=nx, ny=ny, max_iters=max_iters, reynolds_dim=ny,
                        density=density, accel=accel, omega=omega)


def channel_mask(nx, ny):
    solid = create_channel_walls(nx, ny) | create_cylinder_mask(nx, ny, nx // 4, ny // 2, 2)
    return ObstacleMask(solid)


class TestMassConservation:
    """Total density over many timesteps."""

    @pytest.mark.parametrize("use_fast", [True, False])
    def test_no_obstacles_no_accel(self, use_fast):
        params = make_params(nx=16, ny=12, max_iters=50, accel=0.0)
        sim = Simulator(params, ObstacleMask.empty(16, 12), use_fast=use_fast)

        mass_initial = sim.total_density()
        sim.run()

        assert np.isclose(sim.total_density(), mass_initial, rtol=1e-5)
        assert np.isclose(sim.total_density(), mass_initial, rtol=1e-12)

    @pytest.mark.parametrize("use_fast", [True, False])
    def test_with_obstacles_and_accel(self, use_fast):
        """Accelerate moves mass between directions without creating any."""
        params = make_params(max_iters=100)
        sim = Simulator(params, channel_mask(params.nx, params.ny), use_fast=use_fast)

        mass_initial = sim.total_density()
        sim.run()

        relative_change = abs(sim.total_density() - mass_initial) / mass_initial
        assert relative_change < 1e-10, f"Mass changed by {relative_change:.2e}"

    def test_total_density_of_initial_state(self):
        params = make_params(nx=10, ny=7, density=0.1)
        field = LatticeField(10, 7).initialize_equilibrium(params)
        assert np.isclose(total_density(field), 0.1 * 70, rtol=1e-13)


class TestDiagnosticAgreement:
    """average_velocity on the new field equals the pass's return value."""

    @pytest.mark.parametrize("use_fast", [True, False])
    def test_every_step(self, use_fast):
        params = make_params(max_iters=30)
        mask = channel_mask(params.nx, params.ny)
        sim = Simulator(params, mask, use_fast=use_fast)

        for _ in range(params.max_iters):
            av_vel = sim.step()
            assert np.isclose(average_velocity(sim.current, mask), av_vel, rtol=1e-9)

        assert sim.av_vels[-1] > 0.0

    def test_fully_obstructed(self):
        params = make_params(nx=4, ny=4)
        mask = ObstacleMask(np.ones((4, 4), dtype=bool))
        field = LatticeField(4, 4).initialize_equilibrium(params)
        assert average_velocity(field, mask) == 0.0

    def test_equilibrium_is_at_rest(self):
        params = make_params(nx=8, ny=8)
        field = LatticeField(8, 8).initialize_equilibrium(params)
        assert average_velocity(field, ObstacleMask.empty(8, 8)) == 0.0

    def test_obstacle_cells_ignored(self):
        params = make_params(nx=3, ny=3)
        field = LatticeField(3, 3).initialize_equilibrium(params)
        # Large eastward velocity in the obstacle cell only
        field.set(1, 1, 1, 10.0)
        mask = ObstacleMask.from_cells(3, 3, [(1, 1)])
        assert average_velocity(field, mask) == 0.0


class TestReynoldsNumber:
    """Re = u * L / nu with nu = (2/omega - 1) / 6."""

    def test_formula(self):
        params = make_params(ny=16, omega=1.7)
        viscosity = (2.0 / 1.7 - 1.0) / 6.0
        assert np.isclose(reynolds_number(params, 0.01), 0.01 * 16 / viscosity)

    def test_zero_velocity(self):
        assert reynolds_number(make_params(), 0.0) == 0.0

    def test_zero_viscosity_rejected(self):
        with pytest.raises(ConfigurationError, match="omega == 2"):
            reynolds_number(make_params(omega=2.0), 0.01)

    def test_calc_reynolds_uses_field(self):
        params = make_params(max_iters=20)
        mask = channel_mask(params.nx, params.ny)
        sim = Simulator(params, mask)
        sim.run()

        expected = reynolds_number(params, average_velocity(sim.current, mask))
        assert np.isclose(calc_reynolds(params, sim.current, mask), expected)
        assert np.isclose(sim.reynolds_number(), expected)
        assert expected > 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
