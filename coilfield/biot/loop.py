"""
Closed-form magnetic field of a single circular current loop.

The loop has radius a, carries current I and lies in the plane z=0 centred on
the origin. The field is the exact (Maxwell) solution expressed through the
complete elliptic integrals K and E,

    C = mu_0 I / pi
    alpha**2 = a**2 + r**2 + z**2 - 2ar
    beta**2 = a**2 + r**2 + z**2 + 2ar
    k**2 = 1 - alpha**2 / beta**2

    Br = C z / (2 alpha**2 beta r) [(a**2 + r**2 + z**2) E - alpha**2 K]
    Bz = C / (2 alpha**2 beta) [(a**2 - r**2 - z**2) E + alpha**2 K]

Simple Analytic Expressions for the Magnetic Field of a Circular Current Loop,
https://ntrs.nasa.gov/citations/20140002333
"""

import numba
import numpy as np

from coilfield.biot.elliptic import ellipe, ellipk

mu_0 = 4 * np.pi * 1e-7  # magnetic constant [Vs/Am]


@numba.njit(nogil=True, error_model="numpy")
def loop_field_polar(current, a, r, z):
    """
    Return cylindrical field components (Br, Bphi, Bz) induced by a loop.

    Parameters
    ----------
    current : float
        Loop current [A].
    a : float
        Loop radius [m].
    r, z : float
        Radial and axial coordinates of the evaluation point in the loop's
        frame [m].

    Returns
    -------
    br, bphi, bz : float
        Field components [T]. br is zero on the magnetic axis, bphi is
        identically zero by symmetry.

    """
    C = mu_0 * current / np.pi
    rho2 = a * a + r * r + z * z
    alpha2 = rho2 - 2 * a * r
    beta2 = rho2 + 2 * a * r
    beta = np.sqrt(beta2)
    k2 = 1 - alpha2 / beta2
    K = ellipk(k2)
    E = ellipe(k2)
    if r == 0:  # magnetic axis
        br = 0.0
    else:
        br = C * z / (2 * alpha2 * beta * r) * (rho2 * E - alpha2 * K)
    bz = C / (2 * alpha2 * beta) * ((a * a - r * r - z * z) * E + alpha2 * K)
    return br, 0.0, bz


@numba.njit(nogil=True, error_model="numpy")
def loop_field_cartesian(current, a, x, y, z):
    """Return cartesian field components (Bx, By, Bz) induced by a loop."""
    r = np.sqrt(x * x + y * y)
    br, _, bz = loop_field_polar(current, a, r, z)
    if x == 0 and y == 0:  # magnetic axis
        return 0.0, 0.0, bz
    phi = np.arctan2(y, x)
    return br * np.cos(phi), br * np.sin(phi), bz
