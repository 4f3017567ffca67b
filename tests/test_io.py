"""
Tests for input loaders and result writers.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from d2q9_bgk.boundary import ObstacleMask, load_obstacles, parse_obstacles, write_obstacles
from d2q9_bgk.errors import ConfigurationError, OutputError
from d2q9_bgk.field import LatticeField
from d2q9_bgk.output import write_av_vels, write_final_state
from d2q9_bgk.parameters import ParameterSet, load_parameters, parse_parameters, write_parameters


PARAMS_TEXT = "128\n64\n20000\n64\n0.1\n0.005\n1.7\n"


@pytest.fixture
def params():
    return parse_parameters(PARAMS_TEXT)


class TestParameterFile:
    """Seven tokens: nx ny maxIters reynolds_dim density accel omega."""

    def test_parse(self, params):
        assert params == ParameterSet(nx=128, ny=64, max_iters=20000, reynolds_dim=64,
                                      density=0.1, accel=0.005, omega=1.7)
        assert isinstance(params.nx, int)
        assert isinstance(params.density, float)

    def test_any_whitespace(self):
        params = parse_parameters("4 3 10\n2   0.5\t-0.01 1.0")
        assert (params.nx, params.ny, params.max_iters, params.reynolds_dim) == (4, 3, 10, 2)
        assert params.accel == -0.01

    def test_immutable(self, params):
        with pytest.raises(AttributeError):
            params.nx = 4

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "input.params"
        path.write_text(PARAMS_TEXT)
        assert load_parameters(path).omega == 1.7

    def test_write_roundtrip(self, tmp_path, params):
        path = tmp_path / "out.params"
        write_parameters(path, params)
        assert load_parameters(path) == params

    def test_missing_value(self):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_parameters("128\n64\n20000\n64\n0.1\n0.005\n", path="input.params")
        assert "could not read param file: omega" in str(excinfo.value)
        assert str(excinfo.value).startswith("input.params:6:")

    def test_empty_file(self):
        with pytest.raises(ConfigurationError, match="nx"):
            parse_parameters("")

    def test_bad_integer(self):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_parameters("128\n64.5\n20000\n64\n0.1\n0.005\n1.7\n", path="p")
        assert excinfo.value.line == 2
        assert "ny" in excinfo.value.message

    def test_bad_float(self):
        with pytest.raises(ConfigurationError, match="density"):
            parse_parameters("128\n64\n20000\n64\nabc\n0.005\n1.7\n")

    def test_trailing_value(self):
        with pytest.raises(ConfigurationError, match="trailing"):
            parse_parameters(PARAMS_TEXT + "42\n")

    @pytest.mark.parametrize("text, message", [
        ("0 64 10 64 0.1 0.005 1.7", "nx"),
        ("128 -1 10 64 0.1 0.005 1.7", "ny"),
        ("128 64 -5 64 0.1 0.005 1.7", "maxIters"),
        ("128 64 10 0 0.1 0.005 1.7", "reynolds_dim"),
        ("128 64 10 64 0.0 0.005 1.7", "density"),
        ("128 64 10 64 0.1 0.005 0.0", "omega"),
    ])
    def test_out_of_range(self, text, message):
        with pytest.raises(ConfigurationError, match=message):
            parse_parameters(text)

    def test_unstable_omega_warns(self):
        with pytest.warns(RuntimeWarning, match="omega"):
            params = parse_parameters("8 8 10 8 0.1 0.005 2.5")
        assert params.omega == 2.5

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="could not open input parameter file"):
            load_parameters(tmp_path / "missing.params")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_parameters("")


class TestObstacleFile:
    """One 'x y 1' line per blocked cell."""

    def test_parse(self, params):
        mask = parse_obstacles("0 0 1\n127 63 1\n\n5 7 1\n", params)
        assert mask.num_solid == 3
        assert mask.is_solid(0, 0)
        assert mask.is_solid(127, 63)
        assert mask.is_solid(5, 7)
        assert not mask.is_solid(7, 5)

    def test_empty_file(self, params):
        assert parse_obstacles("", params).num_solid == 0

    def test_repeated_entry(self, params):
        assert parse_obstacles("3 3 1\n3 3 1\n", params).num_solid == 1

    @pytest.mark.parametrize("line, message", [
        ("1 2", "expected 3 values per line in obstacle file"),
        ("1 2 1 4", "expected 3 values per line in obstacle file"),
        ("a 2 1", "expected 3 values per line in obstacle file"),
        ("128 2 1", "obstacle x-coord out of range"),
        ("-1 2 1", "obstacle x-coord out of range"),
        ("1 64 1", "obstacle y-coord out of range"),
        ("1 -3 1", "obstacle y-coord out of range"),
        ("1 2 0", "obstacle blocked value should be 1"),
        ("1 2 2", "obstacle blocked value should be 1"),
    ])
    def test_invalid_line(self, params, line, message):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_obstacles("0 0 1\n" + line + "\n", params, path="obstacles.dat")
        assert excinfo.value.message == message
        assert excinfo.value.line == 2
        assert str(excinfo.value) == f"obstacles.dat:2: {message}"

    def test_load_and_write_roundtrip(self, tmp_path, params):
        solid = np.zeros((params.ny, params.nx), dtype=bool)
        solid[0, :] = True
        solid[10:12, 20:25] = True
        mask = ObstacleMask(solid)

        path = tmp_path / "obstacles.dat"
        write_obstacles(path, mask)

        assert load_obstacles(path, params) == mask

    def test_unreadable_file(self, tmp_path, params):
        with pytest.raises(ConfigurationError, match="could not open input obstacles file"):
            load_obstacles(tmp_path / "missing.dat", params)


class TestResultFiles:
    """final_state.dat and av_vels.dat formats."""

    @pytest.fixture
    def small(self):
        params = ParameterSet(nx=3, ny=2, max_iters=2, reynolds_dim=2,
                              density=0.1, accel=0.005, omega=1.7)
        field = LatticeField(3, 2).initialize_equilibrium(params)
        # Eastward flow in cell (2, 0)
        field.set(1, 2, 0, field.get(1, 2, 0) + 0.01)
        mask = ObstacleMask.from_cells(3, 2, [(1, 1)])
        return params, field, mask

    def test_final_state_layout(self, tmp_path, small):
        params, field, mask = small
        path = tmp_path / "final_state.dat"
        write_final_state(path, field, mask, params)

        lines = path.read_text().splitlines()
        assert len(lines) == 6

        coords = [tuple(int(v) for v in line.split()[:2]) for line in lines]
        assert coords == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]

        for line in lines:
            fields = line.split()
            assert len(fields) == 7
            for value in fields[2:6]:
                assert "E" in value
                assert len(value.split("E")[0].split(".")[1]) == 12

    def test_final_state_values(self, tmp_path, small):
        params, field, mask = small
        path = tmp_path / "final_state.dat"
        write_final_state(path, field, mask, params)
        rows = [line.split() for line in path.read_text().splitlines()]

        # fluid cell at rest
        x, y, ux, uy, u, p, flag = rows[0]
        assert float(ux) == 0.0 and float(uy) == 0.0 and float(u) == 0.0
        assert np.isclose(float(p), 0.1 / 3.0, rtol=1e-11)
        assert flag == "0"

        # moving fluid cell
        rho = 0.11
        _, _, ux, uy, u, p, flag = rows[2]
        assert np.isclose(float(ux), 0.01 / rho, rtol=1e-11)
        assert float(uy) == 0.0
        assert np.isclose(float(u), 0.01 / rho, rtol=1e-11)
        assert np.isclose(float(p), rho / 3.0, rtol=1e-11)

        # obstacle cell reports zero velocity and reference pressure
        _, _, ux, uy, u, p, flag = rows[4]
        assert float(ux) == 0.0 and float(u) == 0.0
        assert np.isclose(float(p), params.density / 3.0, rtol=1e-11)
        assert flag == "1"

    def test_av_vels(self, tmp_path):
        path = tmp_path / "av_vels.dat"
        write_av_vels(path, [1e-3, 2.5e-3, 0.0])

        lines = path.read_text().splitlines()
        assert lines == [
            "0:\t1.000000000000E-03",
            "1:\t2.500000000000E-03",
            "2:\t0.000000000000E+00",
        ]

    def test_write_failure(self, tmp_path, small):
        params, field, mask = small
        missing = tmp_path / "no_such_dir" / "final_state.dat"
        with pytest.raises(OutputError):
            write_final_state(missing, field, mask, params)
        with pytest.raises(OutputError):
            write_av_vels(missing, [0.1])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
