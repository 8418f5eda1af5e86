"""Transform positions and field vectors between polar and cartesian frames."""

import numpy as np


def degrees_to_radians(degrees):
    """Return angle in radians."""
    return degrees * np.pi / 180


def radians_to_degrees(radians):
    """Return angle in degrees."""
    return radians * 180 / np.pi


def polar_to_cartesian_coords(r, phi, z):
    """Return cartesian coordinates (x, y, z) from cylindrical (r, phi, z)."""
    return r * np.cos(phi), r * np.sin(phi), z


def cartesian_to_polar_coords(x, y, z):
    """Return cylindrical coordinates (r, phi, z) from cartesian (x, y, z)."""
    return np.sqrt(x**2 + y**2), np.arctan2(y, x), z


def polar_to_cartesian_field(br, bphi, bz, phi):
    """Rotate cylindrical field components (Br, Bphi, Bz) to (Bx, By, Bz)."""
    cos_phi, sin_phi = np.cos(phi), np.sin(phi)
    return br * cos_phi - bphi * sin_phi, br * sin_phi + bphi * cos_phi, bz


def cartesian_to_polar_field(bx, by, bz, phi):
    """Rotate cartesian field components (Bx, By, Bz) to (Br, Bphi, Bz)."""
    cos_phi, sin_phi = np.cos(phi), np.sin(phi)
    return bx * cos_phi + by * sin_phi, -bx * sin_phi + by * cos_phi, bz
