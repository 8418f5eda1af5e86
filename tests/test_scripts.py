from click.testing import CliRunner
import numpy as np
import pytest
import xarray

from coilfield.scripts.cli import coilfield

solenoid_args = ["-nturn", "4", "-nlayer", "2", "-length", "0.2"]


def test_solve(tmp_path):
    output = tmp_path / "field.nc"
    result = CliRunner().invoke(
        coilfield,
        solenoid_args
        + ["solve", "-n", "2", "3", "4", "-workers", "2", "-o", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert "Wrote 24 points" in result.output
    data = output.read_bytes()
    assert data[:3] == b"CDF"
    with xarray.open_dataset(output, engine="scipy") as dataset:
        assert dict(dataset.sizes) == {"r": 2, "phi": 3, "z": 4}
        assert dataset.attrs["nturn"] == 4


def test_solve_cartesian(tmp_path):
    output = tmp_path / "field.nc"
    result = CliRunner().invoke(
        coilfield,
        solenoid_args
        + ["solve", "-n", "2", "2", "2", "-coordinate", "cartesian",
           "-o", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert output.exists()


def test_solve_periodic_azimuth(tmp_path):
    output = tmp_path / "field.nc"
    result = CliRunner().invoke(
        coilfield, solenoid_args + ["solve", "-n", "2", "4", "2", "-o", str(output)]
    )
    assert result.exit_code == 0, result.output
    with xarray.open_dataset(output, engine="scipy") as dataset:
        assert np.allclose(dataset.phi, [0, np.pi / 2, np.pi, 3 * np.pi / 2])


def test_solve_explicit_azimuth(tmp_path):
    output = tmp_path / "field.nc"
    result = CliRunner().invoke(
        coilfield,
        solenoid_args
        + ["solve", "-n", "2", "3", "2", "-phi", "0", "1", "-o", str(output)],
    )
    assert result.exit_code == 0, result.output
    with xarray.open_dataset(output, engine="scipy") as dataset:
        assert np.allclose(dataset.phi, [0, 0.5, 1])


def test_solve_invalid_grid(tmp_path):
    result = CliRunner().invoke(
        coilfield,
        solenoid_args + ["solve", "-r", "1", "0", "-o", str(tmp_path / "f.nc")],
    )
    assert result.exit_code == 2
    assert "r limits inverted" in result.output


def test_solve_invalid_workers(tmp_path):
    result = CliRunner().invoke(
        coilfield,
        solenoid_args + ["solve", "-workers", "0", "-o", str(tmp_path / "f.nc")],
    )
    assert result.exit_code == 2


def test_invalid_solenoid():
    result = CliRunner().invoke(coilfield, ["-nturn", "0", "solve"])
    assert result.exit_code == 2
    assert "nturn" in result.output


def test_benchmark():
    result = CliRunner().invoke(
        coilfield, solenoid_args + ["benchmark", "-n", "2", "2", "2", "-workers", "1", "3"]
    )
    assert result.exit_code == 0, result.output
    lines = result.output.strip().split("\n")
    assert len(lines) == 3
    assert lines[-1].startswith("Calculating field using 3 workers")


def test_benchmark_invalid_workers():
    result = CliRunner().invoke(
        coilfield, solenoid_args + ["benchmark", "-workers", "3", "1"]
    )
    assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__])
