from dataclasses import dataclass
from functools import cached_property
from itertools import product

import numpy as np
import pytest
import scipy.special

from coilfield.biot.loop import loop_field_cartesian, loop_field_polar, mu_0


def axial_vertical_field(radius, height, current):
    """Return analytic axial vertical field."""
    return mu_0 * current * radius**2 / (2 * (radius**2 + height**2) ** (3 / 2))


@dataclass
class AnalyticField:
    """
    Provide access to analytic magnetic field solutions.

    Simple Analytic Expressions for the Magnetic Field of a Circular Current Loop

    Exact cylindrical field components evaluated with scipy's elliptic
    integrals.
    """

    radius: float
    current: float
    r: np.ndarray
    z: np.ndarray

    def __post_init__(self):
        """Initialize C coefficent."""
        self.C = mu_0 * self.current / np.pi

    @property
    def rho2(self):
        """Return rho2 coefficent."""
        return self.radius**2 + self.r**2 + self.z**2

    @property
    def a2(self):
        """Return a2 coefficent."""
        return self.rho2 - 2 * self.radius * self.r

    @property
    def b2(self):
        """Return b2 coefficent."""
        return self.rho2 + 2 * self.radius * self.r

    @property
    def b(self):
        """Return b coefficent."""
        return np.sqrt(self.b2)

    @property
    def k2(self):
        """Return k2 coefficient."""
        return 1 - self.a2 / self.b2

    @cached_property
    def br(self):
        """Return radial magnetic field."""
        return (
            self.C
            * self.z
            / (2 * self.a2 * self.b * self.r)
            * (
                self.rho2 * scipy.special.ellipe(self.k2)
                - self.a2 * scipy.special.ellipk(self.k2)
            )
        )

    @cached_property
    def bz(self):
        """Return z-component of magnetic field vector."""
        return (
            self.C
            / (2 * self.a2 * self.b)
            * (
                (self.radius**2 - self.r**2 - self.z**2)
                * scipy.special.ellipe(self.k2)
                + self.a2 * scipy.special.ellipk(self.k2)
            )
        )


@pytest.mark.parametrize(
    "radius,current,height", list(product([0.1, 1, 2.5], [-3e3, 1, 200], [-2, 0, 0.3]))
)
def test_axial_field(radius, current, height):
    br, bphi, bz = loop_field_polar(current, radius, 0.0, height)
    assert br == 0
    assert bphi == 0
    assert np.isclose(bz, axial_vertical_field(radius, height, current), rtol=1e-13)


@pytest.mark.parametrize("height", [-1.2, 0, 0.7])
def test_axial_field_cartesian(height):
    bx, by, bz = loop_field_cartesian(1e3, 0.4, 0.0, 0.0, height)
    assert bx == 0
    assert by == 0
    assert np.isclose(bz, axial_vertical_field(0.4, height, 1e3), rtol=1e-13)


@pytest.mark.parametrize(
    "r,z", list(product([0.1, 0.5, 1.3, 2.0], [-1.5, -0.2, 0.4, 2.0]))
)
def test_analytic_field(r, z):
    analytic = AnalyticField(1.0, 1e3, np.array(r), np.array(z))
    br, bphi, bz = loop_field_polar(1e3, 1.0, r, z)
    assert np.isclose(br, analytic.br, rtol=1e-9, atol=1e-15)
    assert bphi == 0
    assert np.isclose(bz, analytic.bz, rtol=1e-9, atol=1e-15)


def test_midplane_radial_field():
    br, _, bz = loop_field_polar(1e3, 1.0, 0.5, 0.0)
    assert br == 0
    assert bz > 0


def test_radial_field_antisymmetric():
    upper = loop_field_polar(1e3, 1.0, 0.6, 0.3)
    lower = loop_field_polar(1e3, 1.0, 0.6, -0.3)
    assert upper[0] == -lower[0]
    assert upper[2] == lower[2]


def test_helmholtz_field():
    radius, current = 1.5, 1e4
    bz = sum(
        loop_field_polar(current, radius, 0.0, height)[2]
        for height in [-radius / 2, radius / 2]
    )
    assert np.isclose(bz, (4 / 5) ** (3 / 2) * mu_0 * current / radius, rtol=1e-13)


def test_zero_current():
    assert loop_field_polar(0.0, 1.0, 0.4, 0.2) == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("phi", [-2.4, -np.pi / 2, 0.3, np.pi / 2, 3.0])
def test_cartesian_field(phi):
    r, z = 0.7, -0.25
    br, _, bz = loop_field_polar(1e3, 1.2, r, z)
    bx, by, _bz = loop_field_cartesian(1e3, 1.2, r * np.cos(phi), r * np.sin(phi), z)
    assert np.isclose(bx, br * np.cos(phi), rtol=1e-12, atol=1e-15)
    assert np.isclose(by, br * np.sin(phi), rtol=1e-12, atol=1e-15)
    assert np.isclose(_bz, bz, rtol=1e-12)


def test_cartesian_field_y_axis():
    br, _, bz = loop_field_polar(1e3, 1.2, 0.5, 0.1)
    bx, by, _bz = loop_field_cartesian(1e3, 1.2, 0.0, 0.5, 0.1)
    assert np.all(np.isfinite([bx, by, _bz]))
    assert abs(bx) < 1e-15 * abs(br)
    assert by == br
    assert _bz == bz


def test_filament_singularity():
    br, bphi, bz = loop_field_polar(1.0, 1.0, 1.0, 0.0)
    assert not np.isfinite(bz)


if __name__ == "__main__":
    pytest.main([__file__])
