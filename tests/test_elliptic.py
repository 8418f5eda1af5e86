import numba
import numpy as np
import pytest
import scipy.special

from coilfield.biot.elliptic import ellipe, ellipk

parameters = [-5.0, -1.0, 0.0, 1e-12, 0.1, 0.5, 0.9, 0.99, 0.999999, 1 - 1e-12]


@numba.njit(nogil=True)
def complete_integrals(m):
    """Return K and E evaluated inside nopython code."""
    K = np.empty(len(m))
    E = np.empty(len(m))
    for i in range(len(m)):
        K[i] = ellipk(m[i])
        E[i] = ellipe(m[i])
    return K, E


@pytest.mark.parametrize("m", parameters)
def test_ellipk(m):
    assert np.isclose(ellipk(m), scipy.special.ellipk(m), rtol=1e-15, atol=0)


@pytest.mark.parametrize("m", parameters)
def test_ellipe(m):
    assert np.isclose(ellipe(m), scipy.special.ellipe(m), rtol=1e-15, atol=0)


def test_nopython_call():
    m = np.linspace(-50, 1, 2001, endpoint=False)
    K, E = complete_integrals(m)
    assert np.allclose(K, scipy.special.ellipk(m), rtol=1e-15, atol=0)
    assert np.allclose(E, scipy.special.ellipe(m), rtol=1e-15, atol=0)


def test_ellip_zero_parameter():
    assert np.isclose(ellipk(0.0), np.pi / 2, rtol=1e-15)
    assert np.isclose(ellipe(0.0), np.pi / 2, rtol=1e-15)


def test_ellip_unit_parameter():
    assert ellipk(1.0) == np.inf
    assert ellipe(1.0) == 1.0


def test_ellip_parameter_above_unity():
    assert np.isnan(ellipk(1.5))
    assert np.isnan(ellipe(1.5))


if __name__ == "__main__":
    pytest.main([__file__])
